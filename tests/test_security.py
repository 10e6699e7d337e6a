import pytest

from common.security import (
    RateLimiter,
    sanitize_and_validate,
    sanitize_html,
    validate_input,
    validate_number,
)


# ==========================================
# Sanitize
# ==========================================

def test_sanitize_trims_and_escapes_markup():
    assert sanitize_html("  <script>alert('x')</script>  ") == (
        "&lt;script&gt;alert('x')&lt;/script&gt;"
    )


def test_sanitize_keeps_quotes_as_typed():
    value = sanitize_html('Jl. Ki Hajar Dewantara\'s "Gang 5" & Co')
    assert value == 'Jl. Ki Hajar Dewantara\'s "Gang 5" &amp; Co'


def test_quotes_count_as_one_character_toward_max_length():
    assert sanitize_and_validate("'" * 20, None, 20).is_valid


@pytest.mark.parametrize("raw", [None, 42, ["<b>"], {"a": 1}])
def test_sanitize_non_text_is_empty(raw):
    assert sanitize_html(raw) == ""


@pytest.mark.parametrize("payload", [
    "<img src=x onerror=alert(1)>",
    "Jl. Sudirman <b>No. 10</b>",
    '"><script>alert(1)</script>',
    "a < b > c & d",
])
def test_sanitized_value_never_carries_raw_markup(payload):
    result = sanitize_and_validate(payload, None, 500)
    assert result.is_valid
    assert "<" not in result.value
    assert ">" not in result.value
    assert "&#" not in result.value


def test_markup_in_name_is_rejected():
    result = sanitize_and_validate("<b>Budi</b>", "name", 50)
    assert not result.is_valid
    assert result.error == "Invalid name format"


# ==========================================
# sanitize_and_validate failure reasons
# ==========================================

def test_missing_input_is_required():
    assert sanitize_and_validate(None).error == "Input is required"
    assert sanitize_and_validate("").error == "Input is required"


def test_whitespace_only_is_empty():
    result = sanitize_and_validate("    ")
    assert not result.is_valid
    assert result.error == "Input cannot be empty"
    assert result.value == ""


def test_too_long_is_rejected():
    result = sanitize_and_validate("x" * 21, None, 20)
    assert result.error == "Input too long (max 20 characters)"


def test_length_is_measured_after_escaping():
    # "&" becomes "&amp;" (5 chars)
    assert not sanitize_and_validate("&&&&", None, 10).is_valid
    assert sanitize_and_validate("&&", None, 10).is_valid


def test_valid_result_carries_sanitized_value():
    result = sanitize_and_validate("  Budi Santoso ", "name", 50)
    assert result.is_valid
    assert result.value == "Budi Santoso"
    assert result.error is None


# ==========================================
# Patterns
# ==========================================

@pytest.mark.parametrize("name,ok", [
    ("Budi Santoso", True),
    ("José Ñuñez", True),
    ("Al", True),
    ("B", False),
    ("Budi123", False),
    ("Budi-Santoso", False),
    ("x" * 51, False),
])
def test_name_pattern(name, ok):
    assert validate_input(name, "name") is ok


@pytest.mark.parametrize("phone,ok", [
    ("081234567890", True),
    ("+6281234567890", True),
    ("6281234567", True),
    ("0812345", False),
    ("12345678901", False),
    ("+62812345678901234", False),
    ("0812-3456-7890", False),
])
def test_phone_pattern(phone, ok):
    assert validate_input(phone, "phone") is ok


@pytest.mark.parametrize("value,ok", [("1", True), ("999", True), ("0", False), ("1000", False), ("07", False)])
def test_quantity_pattern(value, ok):
    assert validate_input(value, "quantity") is ok


@pytest.mark.parametrize("value,ok", [("1", True), ("123456", True), ("0", False), ("012", False), ("-3", False)])
def test_id_pattern(value, ok):
    assert validate_input(value, "id") is ok


def test_unknown_kind_never_matches():
    assert validate_input("anything", "email") is False


# ==========================================
# Numbers
# ==========================================

def test_validate_number_accepts_in_range():
    result = validate_number(" 12 ", 1, 999)
    assert result.is_valid
    assert result.value == 12


@pytest.mark.parametrize("raw", ["0", "1000", "abc", "", None, "2.5", True])
def test_validate_number_rejects(raw):
    result = validate_number(raw, 1, 999)
    assert not result.is_valid
    assert result.value == 0
    assert result.error == "Number must be between 1 and 999"


# ==========================================
# Rate limiter
# ==========================================

def test_allows_max_attempts_then_blocks(limiter):
    assert [limiter.is_allowed("order_submission") for _ in range(6)] == [True] * 5 + [False]


def test_rejected_attempts_are_not_recorded(limiter, clock):
    for _ in range(5):
        limiter.is_allowed("k")
    for _ in range(10):
        assert not limiter.is_allowed("k")
    clock.advance(60_000)
    # Only the 5 accepted attempts aged out; the 10 rejections never counted
    assert [limiter.is_allowed("k") for _ in range(6)] == [True] * 5 + [False]


def test_window_slides_with_oldest_attempt(limiter, clock):
    for _ in range(5):
        assert limiter.is_allowed("k")
        clock.advance(1_000)
    # attempts at 0, 1000, 2000, 3000, 4000; now = 5000
    clock.now = 59_999
    assert not limiter.is_allowed("k")
    clock.now = 60_000
    assert limiter.is_allowed("k")       # attempt at 0 aged out
    assert not limiter.is_allowed("k")
    clock.now = 61_000
    assert limiter.is_allowed("k")       # attempt at 1000 aged out


def test_keys_are_independent(limiter):
    for _ in range(5):
        limiter.is_allowed("a")
    assert not limiter.is_allowed("a")
    assert limiter.is_allowed("b")


def test_remaining_does_not_record(limiter):
    assert limiter.remaining("k") == 5
    limiter.is_allowed("k")
    assert limiter.remaining("k") == 4
    assert limiter.remaining("k") == 4


def test_reset(limiter):
    for _ in range(5):
        limiter.is_allowed("a")
        limiter.is_allowed("b")
    limiter.reset("a")
    assert limiter.is_allowed("a")
    assert not limiter.is_allowed("b")
    limiter.reset()
    assert limiter.is_allowed("b")


def test_defaults():
    limiter = RateLimiter()
    assert limiter.max_attempts == 5
    assert limiter.window_ms == 60_000
