"""
Unit tests for codec pipelines.
"""

import pytest

from branded_schema.codec import CodecFailure, CodecSuccess, create_codec
from branded_schema.errors import CodecStepFailedError
from branded_schema.factory import create_interface_definition
from branded_schema.types import Instance, field


@pytest.fixture
def user(registry):
    return create_interface_definition(registry, "User", {"name": field("string")})


class TestCodecPipeline:
    """Tests for CodecPipeline."""

    def test_seeded_with_create(self, user):
        """A fresh codec creates an instance."""
        result = create_codec(user).execute({"name": "Alice"})

        assert isinstance(result, CodecSuccess)
        assert result.success is True
        assert isinstance(result.value, Instance)

    def test_pipe_transforms(self, user):
        """Piped steps run in order on the previous output."""
        codec = (
            create_codec(user)
            .pipe(lambda u: u["name"])
            .pipe(str.upper)
        )

        assert codec.execute({"name": "Alice"}).unwrap() == "ALICE"

    def test_pipe_returns_new_pipeline(self, user):
        """pipe() does not modify the original pipeline."""
        base = create_codec(user)
        piped = base.pipe(lambda u: u)

        assert len(base) == 1
        assert len(piped) == 2

    def test_validation_failure_is_step_zero(self, user):
        """Invalid input fails at the create step."""
        result = create_codec(user).pipe(lambda u: u["name"]).execute({"name": 42})

        assert isinstance(result, CodecFailure)
        assert result.success is False
        assert result.step == 0
        assert result.input == {"name": 42}
        assert "Field 'name'" in result.message

    def test_failure_short_circuits(self, user):
        """Steps after a failure are not run."""
        calls = []

        def boom(u):
            raise ValueError("boom")

        result = create_codec(user).pipe(boom).pipe(calls.append).execute({"name": "Alice"})

        assert result.step == 1
        assert result.message == "boom"
        assert calls == []

    def test_unwrap_failure_raises(self, user):
        """Unwrapping a failure raises CodecStepFailedError."""
        result = create_codec(user).execute({})

        with pytest.raises(CodecStepFailedError, match="Codec step 0 failed") as exc_info:
            result.unwrap()

        assert exc_info.value.step == 0
        assert exc_info.value.code == "CODEC_STEP_FAILED"
