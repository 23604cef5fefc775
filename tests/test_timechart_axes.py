from __future__ import annotations

import unittest

from recording_context import RecordingContext

from timechart.axes import draw_axes, draw_grid, draw_label, time_tick_indices, value_ticks
from timechart.formatting import Formatters
from timechart.geometry import DataDomain, PlotRect, build_mapper
from timechart.options import ChartTheme
from timechart.series import DataPoint, Series


class TickTests(unittest.TestCase):
    def test_value_ticks_span_domain_evenly(self) -> None:
        ticks = value_ticks(DataDomain(min_x=0.0, max_x=1.0, min_y=9.0, max_y=22.0))
        self.assertEqual(ticks.tolist(), [9.0, 12.25, 15.5, 18.75, 22.0])

    def test_value_ticks_collapse_for_degenerate_domain(self) -> None:
        ticks = value_ticks(DataDomain(min_x=0.0, max_x=1.0, min_y=0.0, max_y=0.0))
        self.assertEqual(ticks.tolist(), [0.0])

    def test_time_ticks_are_capped_and_index_spaced(self) -> None:
        self.assertEqual(time_tick_indices(100), [0, 16, 33, 49, 66, 82, 99])
        self.assertEqual(time_tick_indices(3), [0, 1, 2])
        self.assertEqual(time_tick_indices(1), [0])
        self.assertEqual(time_tick_indices(0), [])

    def test_time_tick_indices_are_distinct(self) -> None:
        for n in range(1, 40):
            indices = time_tick_indices(n)
            self.assertEqual(len(indices), len(set(indices)))
            self.assertEqual(len(indices), min(7, n))


class GridRendererTests(unittest.TestCase):
    def setUp(self) -> None:
        self.series = Series.of([DataPoint(0.0, 10.0), DataPoint(100.0, 20.0)])
        self.mapper = build_mapper(self.series, PlotRect.from_canvas(300, 200))
        self.theme = ChartTheme()

    def test_grid_draws_value_and_time_lines_with_labels(self) -> None:
        ctx = RecordingContext()
        assert self.mapper is not None
        draw_grid(ctx, self.series, self.mapper, self.theme, Formatters())

        lines = ctx.of("stroke_line")
        self.assertEqual(len(lines), 5 + 2)
        horizontal = [args for args, _ in lines if args[1] == args[3]]
        vertical = [args for args, _ in lines if args[0] == args[2]]
        self.assertEqual(len(horizontal), 5)
        self.assertEqual(len(vertical), 2)
        for args in horizontal:
            self.assertEqual((args[0], args[2]), (50.0, 280.0))
            self.assertEqual(args[4], self.theme.grid_color)

        labels = [args[2] for args, _ in ctx.of("fill_text")]
        self.assertEqual(labels[:5], ["9.00", "12.25", "15.50", "18.75", "22.00"])
        self.assertEqual(labels[5:], ["01/01", "01/01"])

    def test_label_alignment(self) -> None:
        ctx = RecordingContext()
        assert self.mapper is not None
        draw_grid(ctx, self.series, self.mapper, self.theme, Formatters())
        texts = ctx.of("fill_text")
        value_args, value_kwargs = texts[0]
        self.assertEqual(value_args[0], 45.0)
        self.assertEqual((value_kwargs["align"], value_kwargs["baseline"]), ("right", "middle"))
        time_args, time_kwargs = texts[-1]
        self.assertEqual(time_args[1], 175.0)
        self.assertEqual((time_kwargs["align"], time_kwargs["baseline"]), ("center", "top"))

    def test_grid_uses_injected_formatters(self) -> None:
        ctx = RecordingContext()
        formatters = Formatters(currency=lambda v: f"${v:.0f}", short_date=lambda t: f"t{t:.0f}")
        assert self.mapper is not None
        draw_grid(ctx, self.series, self.mapper, self.theme, formatters)
        labels = [args[2] for args, _ in ctx.of("fill_text")]
        self.assertEqual(labels[0], "$9")
        self.assertEqual(labels[-2:], ["t0", "t100"])

    def test_axes_and_label(self) -> None:
        ctx = RecordingContext()
        draw_axes(ctx, PlotRect.from_canvas(300, 200), self.theme)
        self.assertEqual(
            [args[:4] for args, _ in ctx.of("stroke_line")],
            [(50.0, 170.0, 280.0, 170.0), (50.0, 20.0, 50.0, 170.0)],
        )

        ctx = RecordingContext()
        draw_label(ctx, "", 300.0, self.theme)
        self.assertEqual(ctx.calls, [])
        draw_label(ctx, "Balance", 300.0, self.theme)
        (args, kwargs), = ctx.of("fill_text")
        self.assertEqual(args[:3], (150.0, 5.0, "Balance"))
        self.assertTrue(kwargs["bold"])


if __name__ == "__main__":
    unittest.main()
