# core/test_option_extractor.py
from engine.core.option_extractor import extract_options
from engine.core.subjects import DEFAULT_PROFILE, get_profile


def test_prompt_and_options():
    ex = extract_options("1. What is 2+2?\nА. 3\nБ. 4\nВ. 5\nГ. 6", DEFAULT_PROFILE)
    assert ex.prompt == "What is 2+2?"
    assert ex.options == ["3", "4", "5", "6"]
    assert ex.option_lines_raw == ["А. 3", "Б. 4", "В. 5", "Г. 6"]
    assert ex.left_items == []
    assert ex.image_url is None


def test_continuation_lines_join_previous_option():
    ex = extract_options("1. Q\nА. first\ncontinued here\nБ. second", DEFAULT_PROFILE)
    assert ex.options == ["first continued here", "second"]


def test_out_of_order_letter_stays_in_prompt():
    ex = extract_options("1. Хто автор рядків?\nВ. Стус писав так\nА. a\nБ. b", DEFAULT_PROFILE)
    assert ex.prompt == "Хто автор рядків?\nВ. Стус писав так"
    assert ex.options == ["a", "b"]


def test_image_token_with_width():
    ex = extract_options("1. Q [img: http://x/a.png|w=300]\nА. a\nБ. b", DEFAULT_PROFILE)
    assert ex.image_url == "http://x/a.png"
    assert ex.image_width == 300
    assert ex.prompt == "Q"


def test_image_token_without_width():
    ex = extract_options("1. [image: http://x/b.png] Q", DEFAULT_PROFILE)
    assert ex.image_url == "http://x/b.png"
    assert ex.image_width is None
    assert ex.prompt == "Q"


def test_latin_letters_in_cyrillic_profile():
    ex = extract_options("1. Q\nA. a\nB. b\nC. c\nD. d", DEFAULT_PROFILE)
    assert ex.options == ["a", "b", "c", "d"]
    assert ex.option_lines_raw[1] == "Б. b"


def test_english_profile_reports_latin_letters():
    ex = extract_options("1. Q\nA. a\nB. b\nC. c\nD. d", get_profile("english-language"))
    assert ex.option_lines_raw == ["A. a", "B. b", "C. c", "D. d"]


def test_numbered_lines_become_left_items():
    ex = extract_options(
        "1. Установіть відповідність\n1. Шевченко\n2. Франко\nА. Кобзар\nБ. Мойсей",
        DEFAULT_PROFILE,
    )
    assert ex.left_items == ["1. Шевченко", "2. Франко"]
    assert ex.options == ["Кобзар", "Мойсей"]


def test_options_truncated_to_profile_max():
    lines = "\n".join(f"{ch}. opt{i}" for i, ch in enumerate("АБВГДЕЄЖ"))
    ex = extract_options(f"1. Q\n{lines}", DEFAULT_PROFILE)
    assert len(ex.options) == 7
    assert ex.parsed_option_count == 8


def test_shared_options_only_when_block_has_none():
    ex = extract_options("5. Q", DEFAULT_PROFILE, ["x", "y", "z", "w"])
    assert ex.options == ["x", "y", "z", "w"]
    assert ex.option_lines_raw == ["А. x", "Б. y", "В. z", "Г. w"]

    ex = extract_options("5. Q\nА. own\nБ. own2", DEFAULT_PROFILE, ["x", "y"])
    assert ex.options == ["own", "own2"]
