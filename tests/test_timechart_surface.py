from __future__ import annotations

import unittest
from unittest import mock

import numpy as np

from timechart import ChartConfigError, ChartDataError, ChartError, ChartOptions, ChartSurface, DataPoint, HeadlessHost
from timechart.options import ChartTheme
from timechart.surface import Frame, PointerEvent


THREE_POINTS = [DataPoint(0.0, 10.0), DataPoint(50.0, 30.0), DataPoint(100.0, 20.0)]
STROKE = (52, 152, 219, 255)


def _pixel(surface: ChartSurface, x: float, y: float) -> tuple[int, ...]:
    frame = surface.rgba
    assert frame is not None
    r = surface.pixel_ratio
    return tuple(int(c) for c in frame[int(round(y * r)), int(round(x * r))])


class SurfaceLifecycleTests(unittest.TestCase):
    def test_attach_sizes_canvas_with_pixel_ratio(self) -> None:
        surface = ChartSurface(THREE_POINTS, ChartOptions(height=200))
        surface.attach(HeadlessHost(300, device_pixel_ratio=2.0))
        frame = surface.rgba
        assert frame is not None
        self.assertEqual(frame.shape, (400, 600, 4))
        self.assertEqual(frame.dtype, np.uint8)

    def test_attach_registers_and_detach_releases_pointer_listeners(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS)
        surface.attach(host)
        self.assertEqual(host.listener_count(), 2)
        self.assertEqual(host.listener_count("pointer_move"), 1)
        surface.detach()
        self.assertEqual(host.listener_count(), 0)
        self.assertFalse(surface.attached)
        self.assertIsNone(surface.rgba)

    def test_tooltip_disabled_registers_nothing(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS, {"showTooltip": False})
        surface.attach(host)
        self.assertEqual(host.listener_count(), 0)
        surface.update(options=surface.options.replace(show_tooltip=True))
        self.assertEqual(host.listener_count(), 2)
        surface.update(options=surface.options.replace(show_tooltip=False))
        self.assertEqual(host.listener_count(), 0)

    def test_attach_twice_is_rejected(self) -> None:
        surface = ChartSurface(THREE_POINTS)
        surface.attach(HeadlessHost(300))
        with self.assertRaises(ChartError):
            surface.attach(HeadlessHost(300))

    def test_mounted_releases_listeners_on_error(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS)
        with self.assertRaises(RuntimeError):
            with surface.mounted(host):
                self.assertEqual(host.listener_count(), 2)
                raise RuntimeError("boom")
        self.assertEqual(host.listener_count(), 0)
        self.assertFalse(surface.attached)

    def test_failed_first_draw_still_releases_listeners(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS)
        with mock.patch("timechart.surface.draw_series", side_effect=RuntimeError("draw failed")):
            with self.assertRaises(RuntimeError):
                surface.attach(host)
        self.assertEqual(host.listener_count(), 0)
        self.assertFalse(surface.attached)

    def test_resize_reallocates_canvas(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS)
        surface.attach(host)
        host.width = 420
        surface.on_resize()
        frame = surface.rgba
        assert frame is not None
        self.assertEqual(frame.shape[:2], (200, 420))
        assert surface.frame is not None
        self.assertEqual(surface.frame.rect.width, 350.0)

    def test_height_option_change_resizes_canvas(self) -> None:
        surface = ChartSurface(THREE_POINTS)
        surface.attach(HeadlessHost(300))
        surface.update(options={"height": 120})
        frame = surface.rgba
        assert frame is not None
        self.assertEqual(frame.shape[:2], (120, 300))


class SurfaceDrawTests(unittest.TestCase):
    def test_empty_series_is_a_cleared_noop(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface([], ChartOptions(label="Empty"))
        surface.attach(host)
        frame = surface.rgba
        assert frame is not None
        self.assertFalse(np.any(frame))
        assert surface.frame is not None
        self.assertIsNone(surface.frame.mapper)
        host.move(150, 100)
        self.assertFalse(surface.hover.visible)
        self.assertFalse(surface.overlay.visible)

    def test_update_with_empty_data_clears_canvas_and_hover(self) -> None:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS)
        surface.attach(host)
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        host.move(mapper.scale_x(50.0), mapper.scale_y(30.0))
        self.assertTrue(surface.hover.visible)

        surface.update([])
        frame = surface.rgba
        assert frame is not None
        self.assertFalse(np.any(frame))
        self.assertFalse(surface.hover.visible)
        self.assertFalse(surface.overlay.visible)

    def test_zero_width_container_is_a_noop(self) -> None:
        surface = ChartSurface(THREE_POINTS)
        surface.attach(HeadlessHost(0))
        frame = surface.rgba
        assert frame is not None
        self.assertEqual(frame.shape, (200, 0, 4))

    def test_container_smaller_than_padding_skips_drawing(self) -> None:
        surface = ChartSurface(THREE_POINTS, ChartOptions(label="Tiny"))
        surface.attach(HeadlessHost(60))
        frame = surface.rgba
        assert frame is not None
        self.assertEqual(frame.shape[:2], (200, 60))
        self.assertFalse(np.any(frame))

    def test_repeated_draws_are_pixel_identical(self) -> None:
        surface = ChartSurface(THREE_POINTS, ChartOptions(label="Balance"), cache_base_layer=False)
        surface.attach(HeadlessHost(300, device_pixel_ratio=1.5))
        frame = surface.rgba
        assert frame is not None
        first = frame.copy()
        surface.draw_frame()
        surface.on_resize()
        frame = surface.rgba
        assert frame is not None
        self.assertTrue(np.array_equal(first, frame))

    def test_markers_sit_on_top_of_area_fill(self) -> None:
        surface = ChartSurface(THREE_POINTS)
        surface.attach(HeadlessHost(300))
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        self.assertEqual(_pixel(surface, mapper.scale_x(50.0), mapper.scale_y(30.0)), STROKE)
        # Under the curve, away from gridlines.
        self.assertEqual(_pixel(surface, 120.0, 150.0), (52, 152, 219, 26))

    def test_show_grid_toggles_gridlines_only(self) -> None:
        with_grid = ChartSurface(THREE_POINTS)
        with_grid.attach(HeadlessHost(300))
        without_grid = ChartSurface(THREE_POINTS, ChartOptions(show_grid=False))
        without_grid.attach(HeadlessHost(300))

        theme = ChartTheme()
        self.assertEqual(_pixel(with_grid, 260.0, 20.0), theme.grid_color)
        self.assertEqual(_pixel(without_grid, 260.0, 20.0), (0, 0, 0, 0))
        self.assertEqual(_pixel(without_grid, 200.0, 170.0), theme.axis_color)
        assert without_grid.frame is not None and without_grid.frame.mapper is not None
        mapper = without_grid.frame.mapper
        self.assertEqual(_pixel(without_grid, mapper.scale_x(50.0), mapper.scale_y(30.0)), STROKE)

    def test_bar_mode_fills_bars(self) -> None:
        surface = ChartSurface(THREE_POINTS, ChartOptions(kind="bar", show_grid=False))
        surface.attach(HeadlessHost(300))
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        x = mapper.scale_x(50.0) + 10.0
        y = (mapper.scale_y(30.0) + surface.frame.rect.bottom) / 2.0
        self.assertEqual(_pixel(surface, x, y), STROKE)

    def test_label_is_drawn_above_plot(self) -> None:
        labelled = ChartSurface(THREE_POINTS, ChartOptions(label="Balance"))
        labelled.attach(HeadlessHost(300))
        frame = labelled.rgba
        assert frame is not None
        self.assertTrue(np.any(frame[:12, :, 3] > 0))

        plain = ChartSurface(THREE_POINTS)
        plain.attach(HeadlessHost(300))
        frame = plain.rgba
        assert frame is not None
        self.assertFalse(np.any(frame[:12, :, 3] > 0))

    def test_frame_build_matches_surface_geometry(self) -> None:
        surface = ChartSurface(THREE_POINTS)
        surface.attach(HeadlessHost(300))
        frame = Frame.build(surface.series, surface.options, 300.0)
        self.assertEqual(frame.rect, surface.frame.rect if surface.frame else None)
        self.assertTrue(frame.drawable)


class SurfaceUpdateTests(unittest.TestCase):
    def test_bad_kind_is_reported_and_state_kept(self) -> None:
        surface = ChartSurface(THREE_POINTS)
        surface.attach(HeadlessHost(300))
        frame = surface.rgba
        assert frame is not None
        before = frame.copy()
        with self.assertRaises(ChartConfigError):
            surface.update([DataPoint(0.0, 1.0)], {"kind": "pie"})
        self.assertEqual(surface.options.kind, "line")
        self.assertEqual(len(surface.series), 3)
        frame = surface.rgba
        assert frame is not None
        self.assertTrue(np.array_equal(before, frame))

    def test_record_keys_come_from_options(self) -> None:
        records = [{"t": 0, "v": 1.0}, {"t": 60, "v": 2.5}]
        surface = ChartSurface(records, {"xKey": "t", "yKey": "v"})
        self.assertEqual(surface.series.values.tolist(), [1.0, 2.5])
        self.assertEqual(surface.options.x_key, "t")

        surface.update([{"when": 5, "amount": 3.0}], {"xKey": "when", "yKey": "amount"})
        self.assertEqual(surface.series.points, (DataPoint(5.0, 3.0),))

        with self.assertRaises(ChartDataError):
            surface.update([{"when": 6, "amount": 4.0}], {"xKey": "t", "yKey": "v"})
        self.assertEqual(surface.options.x_key, "when")
        self.assertEqual(len(surface.series), 1)

    def test_update_before_attach_only_stores_state(self) -> None:
        surface = ChartSurface()
        surface.update(THREE_POINTS, {"type": "bar"})
        self.assertIsNone(surface.rgba)
        self.assertEqual(surface.options.kind, "bar")
        surface.attach(HeadlessHost(300))
        self.assertIsNotNone(surface.rgba)


class SurfaceTooltipTests(unittest.TestCase):
    def _surface(self, *, cache: bool = True) -> tuple[ChartSurface, HeadlessHost]:
        host = HeadlessHost(300)
        surface = ChartSurface(THREE_POINTS, ChartOptions(label="Balance"), cache_base_layer=cache)
        surface.attach(host)
        return surface, host

    def test_hover_highlights_point_and_positions_overlay(self) -> None:
        surface, host = self._surface()
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        px, py = mapper.scale_x(50.0), mapper.scale_y(30.0)
        host.move(px + 3, py - 2)

        self.assertTrue(surface.hover.visible)
        self.assertEqual(surface.hover.index, 1)
        self.assertEqual(_pixel(surface, px, py), ChartTheme().highlight_color)
        overlay = surface.overlay
        self.assertEqual((overlay.left, overlay.top), (px, py - 40.0))
        self.assertEqual(overlay.lines, ("1970-01-01", "Balance: 30.00"))

    def test_leave_restores_base_frame(self) -> None:
        surface, host = self._surface()
        frame = surface.rgba
        assert frame is not None
        base = frame.copy()
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        host.move(mapper.scale_x(0.0), mapper.scale_y(10.0))
        frame = surface.rgba
        assert frame is not None
        self.assertFalse(np.array_equal(base, frame))
        host.leave()
        frame = surface.rgba
        assert frame is not None
        self.assertTrue(np.array_equal(base, frame))
        self.assertFalse(surface.overlay.visible)

    def test_cached_and_uncached_highlight_frames_match(self) -> None:
        cached, cached_host = self._surface(cache=True)
        uncached, uncached_host = self._surface(cache=False)
        assert cached.frame is not None and cached.frame.mapper is not None
        mapper = cached.frame.mapper
        for host in (cached_host, uncached_host):
            host.move(mapper.scale_x(100.0), mapper.scale_y(20.0))
        self.assertTrue(np.array_equal(cached.rgba, uncached.rgba))

    def test_explicit_redraw_keeps_hover_highlight(self) -> None:
        surface, host = self._surface()
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        px, py = mapper.scale_x(50.0), mapper.scale_y(30.0)
        highlight = ChartTheme().highlight_color
        host.move(px, py)
        surface.draw_frame()
        self.assertTrue(surface.hover.visible)
        self.assertEqual(_pixel(surface, px, py), highlight)
        host.move(px + 1, py)
        self.assertEqual(_pixel(surface, px, py), highlight)
        host.leave()
        self.assertEqual(_pixel(surface, px, py), STROKE)

    def test_events_ignored_when_tooltip_disabled(self) -> None:
        surface = ChartSurface(THREE_POINTS, ChartOptions(show_tooltip=False))
        surface.attach(HeadlessHost(300))
        assert surface.frame is not None and surface.frame.mapper is not None
        mapper = surface.frame.mapper
        surface.handle_pointer(PointerEvent("pointer_move", x=mapper.scale_x(0.0), y=mapper.scale_y(10.0)))
        self.assertFalse(surface.hover.visible)

    def test_detached_host_events_do_not_reach_surface(self) -> None:
        surface, host = self._surface()
        surface.detach()
        host.move(100, 100)
        self.assertFalse(surface.hover.visible)


if __name__ == "__main__":
    unittest.main()
