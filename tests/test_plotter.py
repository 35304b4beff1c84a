"""
Tests — Batch Plotter
=====================
The resolver is either mocked outright or backed by ``responses``;
``time.sleep`` is patched so the 500 ms pacing is asserted, not waited for.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest
import responses as rsps_lib

from conftest import NOMINATIM_URL, PDOK_URL, make_feature, nominatim_polygon, pdok_hit, pdok_miss
from postcode_mapper.exceptions import PlotInProgressError
from postcode_mapper.map_host import FoliumMapHost, MapHost, OverlayGroup
from postcode_mapper.plotter import BatchPlotter
from postcode_mapper.resolver import PostcodeResolver, default_resolver
from postcode_mapper.status import StatusBoard
from postcode_mapper.styles import LayerStyle

BULK_STYLE = LayerStyle(fill_color="#3388ff", fill_opacity=0.4, stroke_color="#1f5fbf", stroke_weight=2)


def _resolver_for(known: dict[str, object]) -> MagicMock:
    resolver = MagicMock(spec=PostcodeResolver)
    resolver.resolve.side_effect = lambda code: known.get(code)
    return resolver


def _plotter(resolver, mapper_config, status: StatusBoard | None = None) -> tuple[BatchPlotter, FoliumMapHost]:
    host = FoliumMapHost(mapper_config.map_config)
    return BatchPlotter(resolver, host, BULK_STYLE, status=status), host


# ---------------------------------------------------------------------------
# Happy path (mocked HTTP)
# ---------------------------------------------------------------------------


class TestBatchPlotterHttp:
    @rsps_lib.activate
    def test_primary_and_fallback_both_plot(self, mapper_config) -> None:
        # 1951: PDOK hit.  2011: PDOK miss, Nominatim polygon.
        rsps_lib.add(rsps_lib.GET, PDOK_URL, json=pdok_hit(4.63, 52.51), status=200)
        rsps_lib.add(rsps_lib.GET, PDOK_URL, json=pdok_miss(), status=200)
        rsps_lib.add(rsps_lib.GET, NOMINATIM_URL, json=nominatim_polygon(4.65, 52.38), status=200)

        plotter, host = _plotter(default_resolver(user_agent="test/1.0"), mapper_config)
        with patch("postcode_mapper.plotter.time.sleep") as sleep:
            summary = plotter.plot_all(["1951", "2011"])

        assert (summary.success, summary.failed) == (2, 0)
        features = host.group_features(OverlayGroup.BULK)
        assert [f.postcode for f in features] == ["1951", "2011"]
        assert [f.source for f in features] == ["PDOK", "Nominatim"]
        sleep.assert_called_once_with(0.5)

    @rsps_lib.activate
    def test_code_failing_everywhere_is_counted(self, mapper_config) -> None:
        rsps_lib.add(rsps_lib.GET, PDOK_URL, json=pdok_hit(4.63, 52.51), status=200)
        rsps_lib.add(rsps_lib.GET, PDOK_URL, status=500)
        rsps_lib.add(rsps_lib.GET, NOMINATIM_URL, json=[], status=200)

        plotter, host = _plotter(default_resolver(user_agent="test/1.0"), mapper_config)
        with patch("postcode_mapper.plotter.time.sleep"):
            summary = plotter.plot_all(["1951", "9999"])

        assert (summary.success, summary.failed) == (1, 1)
        assert summary.failed_codes == ["9999"]
        assert [f.postcode for f in host.group_features(OverlayGroup.BULK)] == ["1951"]

    @rsps_lib.activate
    @pytest.mark.parametrize(
        "geometry",
        [{"type": "Bogus", "coordinates": []}, {"type": "Polygon", "coordinates": []}],
    )
    def test_unusable_fallback_geometry_counts_as_failure(self, geometry: dict, mapper_config) -> None:
        rsps_lib.add(rsps_lib.GET, PDOK_URL, json=pdok_hit(4.63, 52.51), status=200)
        rsps_lib.add(rsps_lib.GET, PDOK_URL, json=pdok_miss(), status=200)
        rsps_lib.add(rsps_lib.GET, NOMINATIM_URL, json=[{"geojson": geometry}], status=200)

        plotter, host = _plotter(default_resolver(user_agent="test/1.0"), mapper_config)
        with patch("postcode_mapper.plotter.time.sleep"):
            summary = plotter.plot_all(["1951", "2011"])

        assert (summary.success, summary.failed) == (1, 1)
        assert summary.failed_codes == ["2011"]
        assert [f.postcode for f in host.group_features(OverlayGroup.BULK)] == ["1951"]
        bounds, _ = host.viewport
        assert bounds == host.group_features(OverlayGroup.BULK)[0].bounds


# ---------------------------------------------------------------------------
# Sequencing and pacing
# ---------------------------------------------------------------------------


class TestBatchPlotterPacing:
    def test_sleep_between_each_resolution(self, mapper_config) -> None:
        events: list[str] = []
        resolver = MagicMock(spec=PostcodeResolver)
        resolver.resolve.side_effect = lambda code: events.append(f"resolve {code}") or make_feature(code)

        plotter, _ = _plotter(resolver, mapper_config)
        with patch("postcode_mapper.plotter.time.sleep", side_effect=lambda s: events.append(f"sleep {s}")):
            plotter.plot_all(["1951", "2011", "3572"])

        assert events == [
            "resolve 1951",
            "sleep 0.5",
            "resolve 2011",
            "sleep 0.5",
            "resolve 3572",
        ]

    def test_single_code_does_not_sleep(self, mapper_config) -> None:
        plotter, _ = _plotter(_resolver_for({"1951": make_feature("1951")}), mapper_config)
        with patch("postcode_mapper.plotter.time.sleep") as sleep:
            plotter.plot_all(["1951"])
        sleep.assert_not_called()

    def test_failures_still_paced(self, mapper_config) -> None:
        plotter, _ = _plotter(_resolver_for({}), mapper_config)
        with patch("postcode_mapper.plotter.time.sleep") as sleep:
            plotter.plot_all(["1111", "2222", "3333"])
        assert sleep.call_args_list == [call(0.5), call(0.5)]

    def test_custom_delay(self, mapper_config) -> None:
        host = FoliumMapHost(mapper_config.map_config)
        plotter = BatchPlotter(_resolver_for({}), host, BULK_STYLE, delay_seconds=1.1)
        with patch("postcode_mapper.plotter.time.sleep") as sleep:
            plotter.plot_all(["1111", "2222"])
        sleep.assert_called_once_with(1.1)


# ---------------------------------------------------------------------------
# Rendering side effects
# ---------------------------------------------------------------------------


class TestBatchPlotterRendering:
    def test_features_added_with_style_and_popup(self, mapper_config) -> None:
        feature = make_feature("1951")
        host = MagicMock(spec=MapHost)
        host.group_features.return_value = [feature]
        plotter = BatchPlotter(_resolver_for({"1951": feature}), host, BULK_STYLE)

        with patch("postcode_mapper.plotter.time.sleep"):
            plotter.plot_all(["1951"])

        host.add_feature.assert_called_once_with(OverlayGroup.BULK, feature, BULK_STYLE, "Postcode: 1951")

    def test_viewport_fits_union_of_features(self, mapper_config) -> None:
        a = make_feature("1951", lat=52.51, lon=4.63)
        b = make_feature("6211", lat=50.85, lon=5.69)
        plotter, host = _plotter(_resolver_for({"1951": a, "6211": b}), mapper_config)

        with patch("postcode_mapper.plotter.time.sleep"):
            plotter.plot_all(["1951", "6211"])

        assert host.viewport is not None
        bounds, padding = host.viewport
        assert bounds == a.bounds.union(b.bounds)
        assert padding == (50, 50)

    def test_viewport_untouched_when_nothing_plotted(self, mapper_config) -> None:
        host = MagicMock(spec=MapHost)
        host.group_features.return_value = []
        plotter = BatchPlotter(_resolver_for({}), host, BULK_STYLE)

        with patch("postcode_mapper.plotter.time.sleep"):
            summary = plotter.plot_all(["9999"])

        assert (summary.success, summary.failed) == (0, 1)
        host.add_feature.assert_not_called()
        host.fit_bounds.assert_not_called()

    def test_does_not_clear_previous_features(self, mapper_config) -> None:
        plotter, host = _plotter(_resolver_for({"1951": make_feature("1951")}), mapper_config)
        host.add_feature(OverlayGroup.BULK, make_feature("2011"), BULK_STYLE, "Postcode: 2011")

        with patch("postcode_mapper.plotter.time.sleep"):
            plotter.plot_all(["1951"])

        assert [f.postcode for f in host.group_features(OverlayGroup.BULK)] == ["2011", "1951"]

    def test_unexpected_error_counts_as_failure(self, mapper_config) -> None:
        resolver = MagicMock(spec=PostcodeResolver)
        resolver.resolve.side_effect = [RuntimeError("boom"), make_feature("2011")]
        plotter, host = _plotter(resolver, mapper_config)

        with patch("postcode_mapper.plotter.time.sleep"):
            summary = plotter.plot_all(["1951", "2011"])

        assert (summary.success, summary.failed) == (1, 1)
        assert [f.postcode for f in host.group_features(OverlayGroup.BULK)] == ["2011"]


# ---------------------------------------------------------------------------
# Status reporting
# ---------------------------------------------------------------------------


class TestBatchPlotterStatus:
    def test_progress_and_summary_messages(self, mapper_config) -> None:
        messages: list[str] = []
        status = StatusBoard(listener=messages.append)
        plotter, _ = _plotter(_resolver_for({"1951": make_feature("1951")}), mapper_config, status)

        with patch("postcode_mapper.plotter.time.sleep"):
            plotter.plot_all(["1951", "9999"])

        assert messages == [
            "Loading zip codes...",
            "Loading: 1951...",
            "Loading: 9999...",
            "Loaded 1 zip codes successfully, 1 failed",
        ]
        assert status.status == "Loaded 1 zip codes successfully, 1 failed"

    def test_summary_omits_zero_failures(self, mapper_config) -> None:
        status = StatusBoard()
        plotter, _ = _plotter(_resolver_for({"1951": make_feature("1951")}), mapper_config, status)
        plotter.plot_all(["1951"])
        assert status.status == "Loaded 1 zip codes successfully"


# ---------------------------------------------------------------------------
# Re-entrancy and export
# ---------------------------------------------------------------------------


class TestBatchPlotterMisc:
    def test_reentrant_call_raises(self, mapper_config) -> None:
        resolver = MagicMock(spec=PostcodeResolver)
        plotter, _ = _plotter(resolver, mapper_config)
        raised: list[Exception] = []

        def _reenter(code):
            with pytest.raises(PlotInProgressError) as excinfo:
                plotter.plot_all(["2011"])
            raised.append(excinfo.value)
            return None

        resolver.resolve.side_effect = _reenter
        plotter.plot_all(["1951"])

        assert len(raised) == 1
        resolver.resolve.assert_called_once_with("1951")

    def test_running_flag_reset_after_run(self, mapper_config) -> None:
        plotter, _ = _plotter(_resolver_for({}), mapper_config)
        plotter.plot_all(["9999"])
        assert plotter.running is False

    def test_write_geojson(self, tmp_path: Path, mapper_config) -> None:
        plotter, _ = _plotter(_resolver_for({"1951": make_feature("1951"), "2011": make_feature("2011")}), mapper_config)
        with patch("postcode_mapper.plotter.time.sleep"):
            plotter.plot_all(["1951", "2011"])

        out = plotter.write_geojson(tmp_path / "postcodes.geojson")
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["type"] == "FeatureCollection"
        assert [f["properties"]["postcode"] for f in data["features"]] == ["1951", "2011"]
