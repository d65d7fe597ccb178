import pytest

from core.errors import InvalidMember, LineTooShort, MalformedLine, MissingHeader
from services.codec import (
    COLUMNS, LINE_WIDTH, MAX_ATTENDANCE, MAX_MEMBER_ID, SPANS, build_member, decode,
    decode_roster, encode_member, encode_roster, header_line, parse_line
)


def attend(member, times):
    for _ in range(times):
        member.mark_attendance()


def put(line, key, value):
    """Overwrites one column of an encoded line."""
    start, end = SPANS[key]
    return line[:start] + str(value).ljust(end - start)[:end - start] + line[end:]


def file_of(*lines):
    return "\n".join((header_line(),) + lines) + "\n"


# --- LAYOUT ---

def test_columns_are_back_to_back():
    assert SPANS["id"] == (0, 5)
    assert SPANS["name"] == (5, 20)
    assert SPANS["email"] == (50, 75)
    assert SPANS["start_date"] == (75, 95)
    assert SPANS["plan"] == (95, 105)
    assert SPANS["attendance"] == (115, 125)
    assert SPANS["loyalty_points"] == (125, 140)
    assert SPANS["active"] == (140, 150)
    assert SPANS["net_paid"] == (180, 195)
    assert LINE_WIDTH == 195 == sum(c.width for c in COLUMNS)


def test_header_line_uses_the_grid():
    header = header_line()
    assert len(header) == LINE_WIDTH
    assert header.startswith("ID   Name")
    assert header[SPANS["start_date"][0]:SPANS["start_date"][1]] == "Membership Start Dat"


# --- ENCODING ---

def test_encode_regular_member(make_regular):
    m = make_regular()
    m.activate()
    attend(m, 5)
    line = encode_member(m)

    assert len(line) == LINE_WIDTH
    assert line[0:5] == "1    "
    assert line[5:20] == "John Doe".ljust(15)
    assert line[95:105].strip() == "basic"
    assert line[105:115].strip() == "6500.0"
    assert line[115:125].strip() == "5"
    assert line[125:140].strip() == "25.00"
    assert line[140:150].strip() == "Active"
    for key in ("full_payment", "discount", "net_paid"):
        start, end = SPANS[key]
        assert line[start:end].strip() == "N/A"


def test_encode_premium_member(make_premium):
    m = make_premium()
    m.pay_due(30000)
    line = encode_member(m)

    assert line[95:105].strip() == "Premium"
    assert line[105:115].strip() == "50000.0"
    assert line[140:150].strip() == "Inactive"
    assert line[150:165].strip() == "No"
    assert line[165:180].strip() == "0.0"
    assert line[180:195].strip() == "30000.0"


def test_long_values_are_truncated(make_regular):
    m = make_regular(name="Alexander Hamilton-Smith")
    line = encode_member(m)
    assert len(line) == LINE_WIDTH
    assert line[5:20] == "Alexander Hamil"


def test_encode_roster(roster, make_regular, make_premium):
    roster.add(make_regular(1))
    roster.add(make_premium(2))
    text = encode_roster(roster)
    lines = text.split("\n")
    assert text.endswith("\n")
    assert lines[0] == header_line()
    assert lines[1].startswith("1    ")
    assert lines[2].startswith("2    ")
    assert lines[3] == ""


def test_encode_empty_roster(roster):
    assert encode_roster(roster) == header_line() + "\n"


# --- PARSING ---

def test_parse_line_rejects_short_lines():
    with pytest.raises(LineTooShort):
        parse_line("1    John")


@pytest.mark.parametrize("raw_id", ["abc", "1a", "", "1.5"])
def test_parse_line_rejects_bad_ids(make_regular, raw_id):
    line = put(encode_member(make_regular()), "id", raw_id)
    with pytest.raises(MalformedLine):
        parse_line(line)


def test_parse_line_reads_columns(make_regular):
    m = make_regular()
    m.activate()
    attend(m, 7)
    record = parse_line(encode_member(m))
    assert record.id == 1
    assert record.name == "John Doe"
    assert record.location == "Kathmandu"
    assert record.phone == "9812345678"
    assert record.email == "john@example.com"
    assert record.start_date == "2025-01-01"
    assert record.plan == "basic"
    assert record.attendance == 7
    assert record.loyalty_points == 35.0
    assert record.is_active is True
    assert record.is_premium is False


def test_optional_columns_need_full_length(make_regular):
    m = make_regular()
    m.activate()
    attend(m, 7)
    line = encode_member(m)

    record = parse_line(line[:120])
    assert (record.attendance, record.loyalty_points, record.is_active) == (0, 0.0, False)

    # "Active" is present but the line stops before the end of the column
    record = parse_line(line[:146])
    assert record.attendance == 7
    assert record.loyalty_points == 35.0
    assert record.is_active is False


def test_attendance_keeps_only_digits(make_regular):
    line = put(encode_member(make_regular()), "attendance", "1x2")
    assert parse_line(line).attendance == 12

    line = put(line, "attendance", "none")
    assert parse_line(line).attendance == 0

    line = put(line, "attendance", "9999999999")
    assert parse_line(line).attendance == 0


def test_unreadable_loyalty_falls_back_to_zero(make_regular):
    line = put(encode_member(make_regular()), "loyalty_points", "lots")
    assert parse_line(line).loyalty_points == 0.0


@pytest.mark.parametrize("status, expected", [
    ("Active", True), ("Inactive", False), ("active", False), ("", False),
])
def test_active_column_must_match_exactly(make_regular, status, expected):
    line = put(encode_member(make_regular()), "active", status)
    assert parse_line(line).is_active is expected


# --- REBUILDING ---

def test_regular_round_trip_uses_placeholders(roster, make_regular):
    m = make_regular()
    m.activate()
    attend(m, 5)
    roster.add(m)

    report = decode(encode_roster(roster))
    assert report.loaded == 1
    assert report.skipped_count == 0

    loaded = report.members[0]
    assert loaded.id == 1
    assert loaded.name == "John Doe"
    assert loaded.is_active is True
    assert loaded.attendance == 5
    assert loaded.loyalty_points == 25.0
    assert loaded.plan == "basic"
    assert loaded.eligible_for_upgrade is False
    assert loaded.gender == "Male"
    assert loaded.date_of_birth == "1990-01-01"
    assert loaded.referral_source == "Default"


def test_premium_round_trip_replays_loyalty(make_premium):
    m = make_premium()
    m.activate()
    attend(m, 3)
    m.pay_due(50000)

    loaded = build_member(parse_line(encode_member(m)))
    assert loaded.kind.value == "Premium"
    assert loaded.attendance == 3
    assert loaded.loyalty_points == 30.0
    assert loaded.personal_trainer == "Default Trainer"
    # payment columns are informational only
    assert loaded.paid_amount == 0.0
    assert loaded.is_fully_paid is False


def test_upgraded_plan_survives_reload(make_regular):
    m = make_regular()
    m.activate()
    attend(m, 31)
    m.upgrade_plan("deluxe")

    loaded = build_member(parse_line(encode_member(m)))
    assert loaded.plan == "deluxe"
    assert loaded.price == 18500.0
    assert loaded.attendance == 31
    assert loaded.loyalty_points == 155.0
    assert loaded.is_active is True
    assert loaded.eligible_for_upgrade is True


def test_inactive_member_reloads_without_attendance(make_regular):
    m = make_regular()
    m.activate()
    attend(m, 40)
    m.upgrade_plan("standard")
    m.deactivate()

    loaded = build_member(parse_line(encode_member(m)))
    assert loaded.plan == "standard"
    assert loaded.is_active is False
    assert loaded.attendance == 0
    assert loaded.loyalty_points == 0.0


def test_unknown_plan_keeps_basic(make_regular):
    line = put(encode_member(make_regular()), "plan", "gold")
    loaded = build_member(parse_line(line))
    assert loaded.plan == "basic"
    assert loaded.eligible_for_upgrade is False


def test_build_member_rejects_unusable_record(make_regular):
    line = put(encode_member(make_regular()), "id", "0")
    with pytest.raises(InvalidMember):
        build_member(parse_line(line))


# --- DECODING A FILE ---

def test_empty_file_is_fatal():
    with pytest.raises(MissingHeader):
        decode("")
    with pytest.raises(MissingHeader):
        decode("\n" + "x" * 120)


def test_header_only_file():
    report = decode(header_line() + "\n")
    assert report.loaded == 0
    assert report.skipped_count == 0
    assert report.header == header_line()


def test_bad_lines_are_skipped(make_regular, make_premium):
    good = encode_member(make_regular(1))
    other = encode_member(make_premium(2))
    text = file_of(good, "1    John", "", put(good, "id", "xx"), other)

    report = decode(text)
    assert [m.id for m in report.members] == [1, 2]
    assert report.skipped_count == 2
    assert [s.line_no for s in report.skipped] == [3, 5]
    assert "too short" in report.skipped[0].reason
    assert "Invalid member ID" in report.skipped[1].reason


def test_later_duplicate_ids_are_skipped(make_regular, make_premium):
    text = file_of(encode_member(make_regular(4)), encode_member(make_premium(4)))
    report = decode(text)
    assert report.loaded == 1
    assert report.members[0].kind.value == "Regular"
    assert "already exists" in report.skipped[0].reason


def test_windows_line_endings(make_regular):
    text = file_of(encode_member(make_regular(1))).replace("\n", "\r\n")
    report = decode(text)
    assert report.loaded == 1
    assert report.members[0].name == "John Doe"


def test_preview_holds_header_and_non_blank_lines(make_regular):
    good = encode_member(make_regular(1))
    report = decode(file_of(good, "", "short"))
    assert report.preview == "\n".join([header_line(), good, "short"])


def test_decode_roster_replaces_content(roster, make_regular, make_premium):
    roster.add(make_regular(99))
    report = decode_roster(file_of(encode_member(make_premium(1))), roster)
    assert report.loaded == 1
    assert [m.id for m in roster] == [1]


def test_decode_roster_keeps_roster_on_missing_header(roster, make_regular):
    existing = make_regular(99)
    roster.add(existing)
    with pytest.raises(MissingHeader):
        decode_roster("", roster)
    assert roster.all() == (existing,)


def test_huge_attendance_is_applied_in_one_step(make_premium, make_regular):
    premium = make_premium()
    premium.activate()
    line = put(encode_member(premium), "attendance", MAX_ATTENDANCE)
    loaded = build_member(parse_line(line))
    assert loaded.attendance == MAX_ATTENDANCE
    assert loaded.loyalty_points == MAX_ATTENDANCE * 10.0

    regular = make_regular()
    regular.activate()
    line = put(encode_member(regular), "attendance", 999999999)
    loaded = build_member(parse_line(line))
    assert loaded.attendance == 999999999
    assert loaded.eligible_for_upgrade is True


def test_max_member_id_matches_id_column():
    assert MAX_MEMBER_ID == 99999
    assert len(str(MAX_MEMBER_ID)) == SPANS["id"][1] - SPANS["id"][0]
