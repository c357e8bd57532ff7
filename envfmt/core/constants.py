DEFAULT_REGION = "us-east-1"
DEFAULT_PROFILE = "default"

# get_parameters_by_path rejects MaxResults above 10
SSM_PAGE_SIZE = 10

MFA_ROLE_SESSION_NAME = "envfmt"

LOG_FILE_NAME = "envfmt.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT = 10

# exit codes
EXIT_OK = 0
EXIT_USAGE = 2
EXIT_SOURCE_UNAVAILABLE = 3
EXIT_BAD_KEY = 4
EXIT_BAD_VALUE = 5
EXIT_OUTPUT_FAILED = 6
EXIT_INTERRUPTED = 130
