"""
RichProgressBar 單元測試
"""

from unittest.mock import patch

import pytest

from stylizer.core.progress import RichProgressBar


class TestRichProgressBar:
    """計數與 context manager"""

    @pytest.mark.unit
    def test_init(self) -> None:
        bar = RichProgressBar(total=3)
        assert bar.total == 3
        assert bar.success_count == 0
        assert bar.failed_count == 0

    @pytest.mark.unit
    def test_enter_returns_self(self) -> None:
        bar = RichProgressBar(total=1)
        with bar as b:
            assert b is bar

    @pytest.mark.unit
    def test_exit_stops_progress_on_error(self) -> None:
        bar = RichProgressBar(total=1)
        with patch.object(bar._progress, "stop") as mock_stop:
            with pytest.raises(ValueError, match="stylize error"):
                with bar:
                    raise ValueError("stylize error")
            mock_stop.assert_called_once()

    @pytest.mark.unit
    def test_mixed_counts(self) -> None:
        with RichProgressBar(total=4) as bar:
            bar.update("a.png", success=True)
            bar.update("b.png", success=False)
            bar.update("c.png", success=True)
            bar.update("風景.png", success=True)
        assert bar.success_count == 3
        assert bar.failed_count == 1


class TestDescription:
    """進度描述"""

    @pytest.mark.unit
    @pytest.mark.parametrize(("success", "status"), [(True, "OK"), (False, "FAIL")])
    def test_status_in_description(self, success: bool, status: str) -> None:
        bar = RichProgressBar(total=1)
        with patch.object(bar._progress, "update") as mock_update:
            with bar:
                bar.update("photo.jpg", success=success)
        kwargs = mock_update.call_args.kwargs
        assert kwargs["advance"] == 1
        assert "photo.jpg" in kwargs["description"]
        assert status in kwargs["description"]
