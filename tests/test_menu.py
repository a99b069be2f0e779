import io

import pytest

from tally.counts import FrequencyTable
from tally.menu import (
    MENU, AWAITING_CHOICE, LOOKUP, LIST, HISTOGRAM, EXPORT, INVALID_INPUT, INVALID_CHOICE, TERMINATED,
    ConsoleReader, InvalidInput, Menu, Session,
)


def make_menu(user_input, tmp_path, **kwargs):
    table = FrequencyTable.from_tokens("Apple Banana Apple Orange Banana Apple".split())
    stdout = io.StringIO()
    session = Session(
        table,
        stdin=io.StringIO(user_input),
        stdout=stdout,
        output_path=str(tmp_path / "frequency.dat"),
        **kwargs,
    )
    return Menu(session), stdout


def test_reader_reads_several_values_per_line():
    reader = ConsoleReader(io.StringIO("1 Apple\n  \n 2\n"))
    assert reader.read_int() == 1
    assert reader.read_word() == "Apple"
    assert reader.read_int() == 2
    with pytest.raises(EOFError):
        reader.read_int()


def test_reader_failed_int_keeps_word_until_discarded():
    reader = ConsoleReader(io.StringIO("abc def\n3\n"))
    with pytest.raises(InvalidInput):
        reader.read_int()
    assert reader.read_word() == "abc"
    with pytest.raises(InvalidInput):
        reader.read_int()
    reader.discard_line()
    assert reader.read_int() == 3


def test_reader_int_followed_by_letters():
    reader = ConsoleReader(io.StringIO("2abc\n"))
    assert reader.read_int() == 2
    assert reader.read_word() == "abc"


def test_reader_words_keep_non_ascii_separators():
    reader = ConsoleReader(io.StringIO("1 sweet\xa0corn\x1c\x85\v\xa0\n"))
    assert reader.read_int() == 1
    assert reader.read_word() == "sweet\xa0corn\x1c\x85"
    with pytest.raises(InvalidInput):
        reader.read_int()


@pytest.mark.parametrize("text", ["99999999999", "-99999999999", "+", "x1"])
def test_reader_rejects_invalid_or_overflowing_numbers(text):
    reader = ConsoleReader(io.StringIO(text + "\n"))
    with pytest.raises(InvalidInput):
        reader.read_int()


def test_menu_dispatches_choices(tmp_path):
    menu, _ = make_menu("1 Apple\n2\n3\n7\nx\n4\n", tmp_path)
    states = []
    while menu.state != TERMINATED:
        states.append(menu.step())
    assert states == [
        LOOKUP, AWAITING_CHOICE,
        LIST, AWAITING_CHOICE,
        HISTOGRAM, AWAITING_CHOICE,
        INVALID_CHOICE, AWAITING_CHOICE,
        INVALID_INPUT, AWAITING_CHOICE,
        EXPORT, TERMINATED,
    ]


def test_lookup_reports_count(tmp_path):
    menu, stdout = make_menu("1\nBanana\n4\n", tmp_path)
    menu.run()
    assert "Enter the item you wish to search for: The frequency of Banana is 2\n" in stdout.getvalue()


def test_lookup_of_unknown_item_is_listed_afterwards(tmp_path):
    menu, stdout = make_menu("1\nPear\n2\n4\n", tmp_path)
    menu.run()
    output = stdout.getvalue()
    assert "The frequency of Pear is 0\n" in output
    assert "Apple: 3\nBanana: 2\nOrange: 1\nPear: 0\n" in output
    assert (tmp_path / "frequency.dat").read_text() == "Apple 3\nBanana 2\nOrange 1\nPear 0\n"


def test_strict_lookup_leaves_counts_unchanged(tmp_path):
    menu, stdout = make_menu("1\nPear\n2\n4\n", tmp_path, strict_lookup=True)
    menu.run()
    output = stdout.getvalue()
    assert "The frequency of Pear is 0\n" in output
    assert "Pear: 0" not in output
    assert (tmp_path / "frequency.dat").read_text() == "Apple 3\nBanana 2\nOrange 1\n"


def test_histogram(tmp_path):
    menu, stdout = make_menu("3\n4\n", tmp_path, marker="#")
    menu.run()
    assert "Apple: ###\nBanana: ##\nOrange: #\n" in stdout.getvalue()


def test_non_numeric_choice_is_rejected(tmp_path):
    menu, stdout = make_menu("x\n4\n", tmp_path)
    menu.run()
    expected = (
        MENU + "\nEnter your choice: \n"
        "Invalid input. Please enter a number.\n" +
        MENU + "\nEnter your choice: \n"
    )
    assert stdout.getvalue() == expected


def test_rest_of_invalid_line_is_ignored(tmp_path):
    menu, stdout = make_menu("abc 4\n2\n4\n", tmp_path)
    menu.run()
    output = stdout.getvalue()
    assert output.count("Invalid input. Please enter a number.") == 1
    assert "Apple: 3" in output  # the "4" after "abc" did not exit


def test_out_of_range_choice_is_rejected(tmp_path):
    menu, stdout = make_menu("9\n4\n", tmp_path)
    menu.run()
    expected = (
        MENU + "\nEnter your choice: \n"
        "Invalid choice. Please try again.\n\n" +
        MENU + "\nEnter your choice: \n"
    )
    assert stdout.getvalue() == expected


def test_invalid_choices_leave_counts_unchanged(tmp_path):
    menu, _ = make_menu("abc\n99\n-1\n0\n4\n", tmp_path)
    before = dict(menu.session.table.items())
    menu.run()
    assert dict(menu.session.table.items()) == before
    assert (tmp_path / "frequency.dat").read_text() == "Apple 3\nBanana 2\nOrange 1\n"


def test_exit_saves_counts(tmp_path):
    output_path = tmp_path / "frequency.dat"
    output_path.write_text("stale\n")
    menu, _ = make_menu("4\n", tmp_path)
    menu.run()
    assert menu.state == TERMINATED
    assert output_path.read_text() == "Apple 3\nBanana 2\nOrange 1\n"


def test_menu_only_ends_with_exit_choice(tmp_path):
    menu, _ = make_menu("1 Apple\n2\n3\n", tmp_path)
    with pytest.raises(EOFError):
        menu.run()
    assert menu.state == AWAITING_CHOICE
    assert not (tmp_path / "frequency.dat").exists()
