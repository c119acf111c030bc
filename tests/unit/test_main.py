"""Unit tests for the gateway launcher's mode selection."""

from unittest.mock import patch

import pytest

from assistant_gateway import main as launcher


class TestMain:
    """Tests for RUN_MODE handling."""

    @pytest.mark.parametrize(
        ("env", "expected"),
        [({}, "integrated"), ({"RUN_MODE": "SEPARATE"}, "separate"), ({"RUN_MODE": "both"}, "integrated")],
    )
    def test_mode_selects_runner(self, env: dict[str, str], expected: str) -> None:
        """RUN_MODE picks the runner; unknown values fall back to integrated."""
        with (
            patch.dict("os.environ", env, clear=True),
            patch.object(launcher, "run_integrated") as integrated,
            patch.object(launcher, "run_separate") as separate,
        ):
            launcher.main()

        assert integrated.called == (expected == "integrated")
        assert separate.called == (expected == "separate")

    def test_bind_reads_host_and_port(self) -> None:
        """HOST and PORT set where the gateway API listens."""
        with patch.dict("os.environ", {"HOST": "127.0.0.1", "PORT": "9000"}, clear=True):
            assert launcher._bind() == ("127.0.0.1", 9000)
