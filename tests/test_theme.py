import unittest

from metwatch.forecast_tools import ForecastModal, build_modal
from metwatch.layers import LayerStack
from metwatch.theme import DARK_TILES, LIGHT_TILES, MapTheme, Navigation


class NavigationTest(unittest.TestCase):
    def test_pages_are_exclusive(self):
        nav = Navigation()
        self.assertEqual(nav.page, "metwatch")
        self.assertTrue(nav.switch_page("forecast"))
        self.assertEqual(nav.page, "forecast")
        self.assertFalse(nav.switch_page("metwatch"))
        self.assertEqual(nav.page, "metwatch")

    def test_data_page(self):
        nav = Navigation()
        self.assertFalse(nav.switch_page("data"))
        self.assertEqual(nav.page, "data")
        self.assertTrue(nav.switch_page("forecast"))
        self.assertEqual(nav.page, "forecast")

    def test_unknown_page(self):
        with self.assertRaises(ValueError):
            Navigation().switch_page("radar")

    def test_settings_toggle(self):
        nav = Navigation()
        self.assertTrue(nav.toggle_settings())
        nav.close_settings()
        self.assertFalse(nav.settings_open)


class MapThemeTest(unittest.TestCase):
    def test_swaps_both_maps(self):
        main, forecast = LayerStack(), LayerStack()
        theme = MapTheme(main, forecast)
        self.assertIs(main.base, DARK_TILES)
        self.assertIs(forecast.base, DARK_TILES)
        theme.set_theme("light")
        self.assertIs(main.base, LIGHT_TILES)
        self.assertIs(forecast.base, LIGHT_TILES)
        self.assertEqual(main.draw_order()[0], LIGHT_TILES.name)

    def test_unknown_theme(self):
        with self.assertRaises(ValueError):
            MapTheme(LayerStack(), theme="sepia")


class ForecastModalTest(unittest.TestCase):
    def test_titles_round_coordinates(self):
        self.assertEqual(build_modal("skewt", 40.7128, -74.006).title, "Sounding @ 40.71, -74.01")
        self.assertEqual(build_modal("meteogram", 1.005, 2).title, "Meteogram @ 1.00, 2.00")
        self.assertEqual(build_modal("xsection", 0, 0).title, "Cross Section @ 0.00, 0.00")

    def test_open_and_close(self):
        modal = ForecastModal()
        self.assertFalse(modal.is_open)
        content = modal.open("meteogram", 38.5, -95.25)
        self.assertEqual(content.message, "Generating Meteogram...")
        self.assertEqual(modal.last_point, (38.5, -95.25))
        modal.close()
        self.assertFalse(modal.is_open)
        self.assertEqual(modal.last_point, (38.5, -95.25))


if __name__ == "__main__":
    unittest.main()
