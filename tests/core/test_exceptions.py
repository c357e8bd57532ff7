import pytest

from envfmt.core import exceptions


class TestSourceUnavailable:
    def test_message_includes_cause(self):
        cause = ConnectionError("timed out")
        error = exceptions.SourceUnavailable("Failed to reach Parameter Store", cause=cause)

        assert str(error) == "Failed to reach Parameter Store: timed out"
        assert error.cause is cause

    def test_without_cause(self):
        error = exceptions.SourceUnavailable("Failed to find profile")

        assert str(error) == "Failed to find profile"
        assert error.cause is None


class TestExitCodes:
    @pytest.mark.parametrize(
        "error_class, code",
        [
            (exceptions.UnsupportedFormat, 2),
            (exceptions.SourceUnavailable, 3),
            (exceptions.MalformedKey, 4),
            (exceptions.EmptyIdentifier, 4),
            (exceptions.IdentifierCollision, 4),
            (exceptions.UnsupportedValue, 5),
        ],
    )
    def test_each_failure_class_has_a_non_zero_code(self, error_class, code):
        assert issubclass(error_class, exceptions.EnvfmtError)
        assert error_class.exit_code == code
