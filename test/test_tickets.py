"""Layout tests for the four ticket builders."""

import random
from datetime import date

import pytest

from commands import emphasis, hr, init, inverse, qr_code, text_size, trailer
from print_tasks import PrintRequest, Task, WifiRequest
from tickets import (
    build_daily_ticket,
    build_single,
    build_single_ticket,
    build_ticket,
    build_weekly_ticket,
    build_wifi_ticket,
    due_date_key,
    escape_wifi,
    group_by_day,
    task_qr_data,
    title_size,
    unescape_wifi,
    wifi_uri,
)

MUELL = Task(id="1", title="Müll raus bringen", labels=("Gelb",))


class TestSingleTicket:
    """Tests for build_single_ticket and build_single."""

    def test_muell_scenario(self):
        """One labelled task prints QR, code page title and chip."""
        payload = build_ticket(PrintRequest(host="printer", tasks=(MUELL,), mode="single"))
        assert b"\x1d\x28\x6b\x0d\x00\x31\x50\x30donotick:1" in payload
        assert qr_code("donotick:1", size=8) in payload
        # size 3 title wraps at 10 columns
        assert b"M\xfcll raus\n" in payload
        assert "ü".encode("utf-8") not in payload
        assert b"[Gelb]\n" in payload

    def test_framed_by_init_and_trailer(self):
        """Ticket starts with init and ends with the trailer."""
        payload = build_single_ticket(MUELL)
        assert payload.startswith(init())
        assert payload.endswith(trailer())

    def test_banner(self):
        """Inverted double size DO IT banner."""
        assert inverse(True) + text_size(2, 2) + b" * DO IT! * \n" in build_single_ticket(MUELL)

    @pytest.mark.parametrize("length, size", [(1, 3), (20, 3), (21, 2), (60, 2)])
    def test_title_size_boundaries(self, length, size):
        """3x up to 20 characters, 2x beyond."""
        assert title_size("x" * length) == size

    def test_twenty_char_title_prints_large(self):
        """20 characters still print at 3x."""
        payload = build_single_ticket(Task(id="1", title="a" * 20))
        assert text_size(3, 3) + emphasis(True) in payload

    def test_twenty_one_char_title_prints_smaller(self):
        """21 characters print at 2x."""
        payload = build_single_ticket(Task(id="1", title="a" * 21))
        assert text_size(2, 2) + emphasis(True) in payload
        assert text_size(3, 3) not in payload

    def test_size_counts_cleaned_title(self):
        """Size is decided after emoji are stripped."""
        # 20 characters once the pictographs are gone
        payload = build_single_ticket(Task(id="1", title="🎉🎉 " + "b" * 20))
        assert text_size(3, 3) + emphasis(True) in payload

    def test_description_block(self):
        """Description sits under a thin rule with punctuation folded."""
        task = Task(id="9", title="Tonne", description="Gelbe Säcke – vor 7 Uhr")
        payload = build_single_ticket(task)
        assert hr("-") in payload
        assert b"Gelbe S\xe4cke - vor 7 Uhr\n" in payload

    def test_no_description_no_thin_rule(self):
        """Without description only the thick rule is printed."""
        assert hr("-") not in build_single_ticket(MUELL)
        assert hr("=") in build_single_ticket(MUELL)

    def test_no_labels_no_chips(self):
        """No labels, no chip line."""
        assert b"[" not in build_single_ticket(Task(id="1", title="Kochen"))

    @pytest.mark.parametrize(
        "task_id, expected",
        [("1", "donotick:1"), (17, "donotick:17"), (None, "donotick:Kochen"), ("", "donotick:Kochen"), (0, "donotick:Kochen")],
    )
    def test_qr_falls_back_to_title_only_when_id_falsy(self, task_id, expected):
        """QR uses the id, or the title when the id is falsy."""
        task = Task(id=task_id, title="Kochen")
        assert task_qr_data(task) == expected
        assert qr_code(expected, size=8) in build_single_ticket(task)

    def test_one_ticket_per_task(self):
        """Each task gets its own framed ticket."""
        payload = build_single([MUELL, Task(id="2", title="Kochen")])
        assert payload.count(trailer()) == 2
        assert payload.count(init()) == 2
        assert payload.endswith(trailer())

    def test_blank_title_still_prints(self):
        """Title that cleans to nothing still prints a ticket."""
        payload = build_single_ticket(Task(id="5", title="✨"))
        assert payload.endswith(trailer())
        assert qr_code("donotick:5", size=8) in payload


class TestDailyTicket:
    """Tests for build_daily_ticket."""

    TASKS = [
        Task(id="1", title="Fenster im Wohnzimmer und in der Kueche putzen", labels=("Haus", "Wichtig")),
        Task(id="2", title="🛒 Einkaufen"),
    ]

    def test_header_with_date(self):
        """Header shows HEUTE and the day."""
        payload = build_daily_ticket(self.TASKS, today=date(2024, 3, 5))
        assert inverse(True) + text_size(2, 1) + b" HEUTE 05.03 " in payload

    def test_header_override(self):
        """header_title replaces the HEUTE header."""
        payload = build_daily_ticket(self.TASKS, header_title="Morgenrunde")
        assert b" Morgenrunde " in payload
        assert b"HEUTE" not in payload

    def test_count_line(self):
        """Task count sits above a thin rule."""
        assert b"2 Aufgaben\n" + hr("-") in build_daily_ticket(self.TASKS)

    def test_wrapped_title_continuation_not_emphasized(self):
        """Only the bullet line is bold; labels follow the continuation."""
        payload = build_daily_ticket(self.TASKS)
        assert (
            emphasis(True)
            + b"- Fenster im Wohnzimmer und in\n"
            + emphasis(False)
            + b"  der Kueche putzen\n"
            + b"  [Haus] [Wichtig]\n"
        ) in payload

    def test_short_title_single_line(self):
        """Emoji stripped, one bold bullet line."""
        assert emphasis(True) + b"- Einkaufen\n" + emphasis(False) in build_daily_ticket(self.TASKS)

    def test_blank_title_prints_blank_bullet(self):
        """Empty cleaned title still prints its bullet."""
        payload = build_daily_ticket([Task(title="🎉")])
        assert emphasis(True) + b"- \n" + emphasis(False) in payload

    def test_ends_with_rule_and_trailer(self):
        """List closes with a thin rule and the trailer."""
        payload = build_daily_ticket(self.TASKS)
        assert payload.startswith(init())
        assert payload.endswith(hr("-") + trailer())

    def test_default_mode_for_several_tasks(self):
        """Several tasks without mode print the daily list."""
        payload = build_ticket(PrintRequest(host="h", tasks=tuple(self.TASKS)))
        assert b"HEUTE" in payload
        assert b"donotick:" not in payload

    def test_compact_single_task(self):
        """compact prints one task as a daily list."""
        payload = build_ticket(PrintRequest(host="h", tasks=(MUELL,), compact=True))
        assert b"1 Aufgaben\n" in payload


class TestWeeklyGrouping:
    """Tests for due_date_key and group_by_day."""

    def test_date_key_formats(self):
        """ISO values map to their UTC calendar day."""
        assert due_date_key("2024-03-06T18:00:00Z") == "2024-03-06"
        assert due_date_key("2024-03-06T18:00:00.000Z") == "2024-03-06"
        assert due_date_key("2024-03-06T23:30:00-02:00") == "2024-03-07"
        assert due_date_key("2024-03-06") == "2024-03-06"

    @pytest.mark.parametrize("due", [None, "", "soon", "2024-13-40T00:00:00Z"])
    def test_missing_or_bad_due_is_undated(self, due):
        """Missing or unparseable due gives no key."""
        assert due_date_key(due) is None

    @pytest.mark.parametrize("seed", range(5))
    def test_bucket_keys_strictly_ascending(self, seed):
        """Bucket keys come out strictly ascending."""
        rng = random.Random(seed)
        tasks = [
            Task(id=str(i), title=f"t{i}", due=f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}T12:00:00Z")
            for i in range(25)
        ]
        groups, undated = group_by_day(tasks)
        keys = list(groups)
        assert keys == sorted(set(keys))
        assert all(a < b for a, b in zip(keys, keys[1:]))
        assert sum(len(v) for v in groups.values()) == 25
        assert undated == []

    def test_order_kept_inside_bucket(self):
        """Input order is kept inside a bucket."""
        a = Task(id="a", title="A", due="2024-03-06T18:00:00Z")
        b = Task(id="b", title="B", due="2024-03-06T07:00:00Z")
        c = Task(id="c", title="C")
        d = Task(id="d", title="D")
        groups, undated = group_by_day([a, c, b, d])
        assert groups == {"2024-03-06": [a, b]}
        assert undated == [c, d]


class TestWeeklyTicket:
    """Tests for build_weekly_ticket."""

    TASKS = [
        Task(id="1", title="Sport", due="2024-03-06T18:00:00Z"),
        Task(id="2", title="Zahnarzt", due="2024-03-04T08:00:00Z", labels=("Termin",)),
        Task(id="3", title="Steuer machen"),
        Task(id="4", title="Yoga", due="2024-03-06T07:00:00+00:00"),
    ]

    def test_header(self):
        """WOCHENPLAN header with the cleaned week range."""
        payload = build_weekly_ticket(self.TASKS, "4.–10. März")
        assert text_size(1, 2) + b" WOCHENPLAN \n" in payload
        assert b" 4.-10. M\xe4rz \n" in payload

    def test_default_range(self):
        """Missing range prints Diese Woche."""
        assert b" Diese Woche \n" in build_weekly_ticket(self.TASKS)

    def test_day_banners_in_date_order(self):
        """Day banners ascend, undated bucket last."""
        payload = build_weekly_ticket(self.TASKS)
        monday = payload.index(inverse(True) + b" Mo 4.3 " + inverse(False) + b" (1)\n")
        wednesday = payload.index(inverse(True) + b" Mi 6.3 " + inverse(False) + b" (2)\n")
        undated = payload.index(inverse(True) + b" OHNE DATUM " + inverse(False) + b" (1)\n")
        assert monday < wednesday < undated

    def test_task_lines_match_daily_style(self):
        """Task lines look like the daily list."""
        payload = build_weekly_ticket(self.TASKS)
        assert emphasis(True) + b"- Zahnarzt\n" + emphasis(False) + b"  [Termin]\n" in payload
        assert payload.index(b"- Sport\n") < payload.index(b"- Yoga\n")

    def test_total_counts_dated_and_undated(self):
        """Grand total counts every task."""
        payload = build_weekly_ticket(self.TASKS)
        assert hr("=") in payload
        assert emphasis(True) + b"GESAMT: 4 Aufgaben\n" + emphasis(False) + trailer() in payload
        assert payload.endswith(trailer())

    def test_no_undated_bucket_when_all_dated(self):
        """OHNE DATUM is skipped when empty."""
        payload = build_weekly_ticket([t for t in self.TASKS if t.due])
        assert b"OHNE DATUM" not in payload
        assert b"GESAMT: 3 Aufgaben\n" in payload

    def test_only_undated(self):
        """Only undated tasks still print their bucket."""
        payload = build_weekly_ticket([Task(title="Irgendwann")])
        assert b" OHNE DATUM " in payload
        assert b"GESAMT: 1 Aufgaben\n" in payload

    def test_header_title_used_as_range_fallback(self):
        """header_title stands in for a missing week range."""
        payload = build_ticket(PrintRequest(host="h", tasks=tuple(self.TASKS), mode="weekly", header_title="KW 10"))
        assert b" KW 10 \n" in payload


class TestWifi:
    """Tests for the WiFi URI and ticket."""

    def test_uri_with_password(self):
        """WPA network with password."""
        assert wifi_uri("Zuhause", "geheim") == "WIFI:T:WPA;S:Zuhause;P:geheim;;"

    def test_uri_nopass_drops_password(self):
        """nopass never carries a password."""
        assert wifi_uri("Cafe", "ignored", type="nopass") == "WIFI:T:nopass;S:Cafe;;"

    def test_uri_empty_password_dropped(self):
        """Empty password is left out."""
        assert wifi_uri("Zuhause", "") == "WIFI:T:WPA;S:Zuhause;;"

    def test_uri_hidden(self):
        """Hidden networks add H:true."""
        assert wifi_uri("Versteckt", "pw", type="WEP", hidden=True) == "WIFI:T:WEP;S:Versteckt;P:pw;H:true;;"

    def test_escaping(self):
        """Special characters are backslash-escaped."""
        assert escape_wifi('a\\b;c,d:e"f') == 'a\\\\b\\;c\\,d\\:e\\"f'
        assert wifi_uri("My;Net", "p:w") == "WIFI:T:WPA;S:My\\;Net;P:p\\:w;;"

    @pytest.mark.parametrize("value", ["plain", 'all\\;,:"', "\\\\;;", "trailing\\", ""])
    def test_escape_round_trip(self, value):
        """Unescaping restores the original value."""
        assert unescape_wifi(escape_wifi(value)) == value

    def test_ticket_layout(self):
        """Header, SSID, framed QR and instructions."""
        payload = build_wifi_ticket("Zuhause", "geheim")
        assert payload.startswith(init())
        assert inverse(True) + text_size(2, 1) + b" WLAN " in payload
        assert text_size(2, 2) + emphasis(True) + b"Zuhause\n" in payload
        assert hr("=") + qr_code("WIFI:T:WPA;S:Zuhause;P:geheim;;", size=10) in payload
        assert payload.endswith(b"QR-Code scannen\nzum Verbinden\n" + trailer())

    def test_build_ticket_dispatches_wifi(self):
        """WifiRequest goes to the WiFi builder."""
        request = WifiRequest(host="h", ssid="Gäste", type="nopass", hidden=True)
        payload = build_ticket(request)
        assert b"G\xe4ste\n" in payload
        assert qr_code("WIFI:T:nopass;S:Gäste;H:true;;", size=10) in payload
