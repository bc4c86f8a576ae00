"""
Tests for the page view-model builders.
"""
import logging

import pytest

from app.explorer import views
from app.explorer.catalog import ALL_PERIODS, Catalog
from app.explorer.dates import display_date
from app.explorer.locations import LocationResolver, Projection


class TestEventCard:
    def test_unknown_period_card_still_renders(self):
        catalog = Catalog()
        card = views.event_card(catalog, {"title": "Battle of Bach Dang", "date": {"year": 938}})
        assert card.period == "Unknown Period"
        assert card.date == "938 AD"
        assert card.location == "Unknown Location"
        assert card.description == "No description available"

    def test_full_card(self, catalog, events):
        card = views.event_card(catalog, events[2])
        assert card.id == "e3"
        assert card.period == "Monarchical Era"
        assert card.description == "Mongol fleet destroyed."
        assert card.location == "Bạch Đằng River"
        assert card.tags == ["naval", "Mongol invasions"]
        assert card.image.startswith("images/event")
        assert card.url == "events-detail.html?id=e3"

    def test_tags_are_capped(self, catalog):
        card = views.event_card(catalog, {"_id": "x", "tags": ["a", "b", "c", "d"]})
        assert card.tags == ["a", "b", "c"]
        assert card.title == "Untitled Event"

    def test_malformed_optional_fields_fall_back(self):
        card = views.event_card(Catalog(), {
            "title": "Battle of Bach Dang",
            "titleVietnamese": 938,
            "date": {"year": 938},
            "location": {"name": ["Bach Dang"], "province": "Quang Ninh"},
        })
        assert card.title == "Battle of Bach Dang"
        assert card.title_vietnamese is None
        assert card.period == "Unknown Period"
        assert card.location == "Quang Ninh"
        assert views.event_card(Catalog(), {"title": 42}).title == "Untitled Event"

    def test_home_card(self, catalog, events):
        card = views.home_card(catalog, events[2], 1)
        assert card.date == "Apr 9, 1288 AD"
        assert card.image is None
        assert card.background == views.index_gradient(1)


class TestSearchPanel:
    def test_closed_for_short_query(self, catalog):
        assert not views.search_panel(catalog, "a", None).open

    def test_no_results_message(self, catalog):
        panel = views.search_panel(catalog, "pagoda", [])
        assert panel.open
        assert panel.message == 'No events found matching "pagoda"'

    def test_result_info(self, catalog, events):
        panel = views.search_panel(catalog, "battle", [events[2], events[3]])
        assert [item.id for item in panel.results] == ["e3", "e4"]
        assert panel.results[0].info == "April 9, 1288 AD • Monarchical Era"
        assert panel.results[1].info == "938 AD • Unknown Period"

    def test_map_uses_display_date(self, catalog, events):
        panel = views.search_panel(catalog, "battle", [events[2]], date_label=display_date)
        assert panel.results[0].info == "1288 • Monarchical Era"


class TestButtons:
    def test_period_buttons(self, catalog):
        buttons = views.period_buttons(catalog, "p1")
        assert [b.id for b in buttons] == [ALL_PERIODS, "p1", "p2", "p3"]
        assert [b.active for b in buttons] == [False, True, False, False]

    def test_colored_without_all(self, catalog):
        buttons = views.period_buttons(catalog, ALL_PERIODS, include_all=False, colored=True)
        assert [b.color for b in buttons] == ["#8B4513", "#FFD700", "#94a3b8"]

    def test_sub_period_buttons(self, catalog):
        buttons = views.sub_period_buttons(catalog, "p1", "sp2")
        assert [(b.id, b.color, b.active) for b in buttons] == [
            ("sp1", "#A0522D", False),
            ("sp2", "#8B4513", True),
        ]
        assert views.sub_period_buttons(catalog, None, None) == []


class TestMap:
    def test_markers_skip_missing_locations(self, catalog, events):
        resolver = LocationResolver(Projection.SVG)
        markers = views.map_markers(catalog, resolver, events)
        assert [m.id for m in markers] == ["e1", "e2", "e3"]
        assert markers[0].color == "#8B4513"
        assert markers[1].x == pytest.approx(346.7575)

    def test_latlng_markers(self, catalog, events):
        marker = views.map_marker(catalog, LocationResolver(Projection.LATLNG), events[1])
        assert (marker.lat, marker.lng) == (21.1153, 105.8703)
        assert marker.x is None

    def test_annotations_sorted_by_year(self, catalog, events):
        items = views.annotations(catalog, events)
        assert [a.id for a in items] == ["e1", "e2", "e5", "e4", "e3"]
        assert items[3].color == "#667eea"

    def test_popup(self, catalog, events):
        popup = views.popup(catalog, LocationResolver(), events[0])
        assert popup.period == "Ancient Vietnam"
        assert popup.date == "-2879"
        assert popup.location == "Phú Thọ"
        assert views.popup(catalog, LocationResolver(), events[3]) is None


class TestTimeline:
    def test_items(self, catalog, events):
        items = views.timeline_items(catalog, events)
        by_id = {item.id: item for item in items}
        assert by_id["e1"].start == "-002879-01-01"
        assert by_id["e1"].type == "box"
        assert by_id["e3"].type == "range"
        assert by_id["e3"].end == "+001288-05-01"
        assert "#FFD700" in by_id["e3"].style

    def test_undated_event_is_skipped(self, catalog, caplog):
        with caplog.at_level(logging.WARNING, logger="app.explorer.views"):
            items = views.timeline_items(catalog, [{"_id": "x", "title": "Undated"}])
        assert items == []
        assert "Undated" in caplog.text

    def test_window_padding(self, catalog, events):
        items = views.timeline_items(catalog, [events[1], events[3]])
        window = views.timeline_window(items)
        assert window.start == pytest.approx(-257 - 119.5)
        assert window.end == pytest.approx(938 + 119.5)

    def test_default_window(self):
        assert views.timeline_window([]) == views.TimelineWindow(start=-2879, end=2025)

    def test_legend(self, catalog):
        legend = views.legend(catalog)
        assert [item.name for item in legend] == ["Ancient Vietnam", "Monarchical Era", "Unsorted Era"]
        assert legend[0].years == "2879 BC - 111 BC"
        assert legend[2].years == "Various dates"

    def test_stats(self, catalog, events):
        stats = views.timeline_stats(catalog, events[:2], "p1")
        assert stats.total_events == 5
        assert stats.visible_events == 2
        assert stats.periods_count == 2
        assert stats.years_of_history == 2879 - 257


class TestEventDetail:
    def test_full_detail(self, catalog, events):
        detail = views.event_detail(catalog, events[2])
        assert detail.page_title == "Battle of Bạch Đằng - Vietnamese History"
        assert detail.date_full == "April 9, 1288 AD"
        assert detail.key_figures[0].role == "Supreme Commander"
        assert detail.key_figures[0].description == "No description available."
        assert detail.tags == ["naval", "Mongol invasions"]
        assert detail.related is None

    def test_broken_section_does_not_break_page(self, catalog, events):
        event = dict(events[2], keyFigures=["not a figure"])
        detail = views.event_detail(catalog, event)
        assert detail.key_figures is None
        assert detail.tags == ["naval", "Mongol invasions"]
        assert detail.title == "Battle of Bạch Đằng"

    def test_related_events(self, catalog, events):
        detail = views.event_detail(catalog, events[0])
        assert [r.id for r in detail.related] == ["e2", "e5"]
        assert detail.related[0].url == "events-detail.html?id=e2"

    def test_paragraphs(self):
        detail = views.event_detail(Catalog(), {"description": "One.\n\nTwo.", "significance": ""})
        assert detail.description == ["One.", "Two."]
        assert detail.significance is None
        assert detail.period == "Unknown Period"

    def test_non_text_description(self):
        detail = views.event_detail(Catalog(), {"title": "X", "description": ["a"], "significance": 7})
        assert detail.title == "X"
        assert detail.description == ["No description available."]
        assert detail.significance is None
        assert views.paragraphs(None) == []
