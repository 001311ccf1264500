"""Tests for shell command parsing."""

import pytest

from localshare.models import (
    CancelCommand,
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    PinCommand,
    SelectCommand,
    UploadCommand,
)
from localshare.parser import ParseError, parse_command


def test_parse_pin():
    assert parse_command('pin 1234') == PinCommand(pin='1234')


def test_parse_pin_requires_value():
    with pytest.raises(ParseError, match='pin requires'):
        parse_command('pin')


def test_parse_login_with_and_without_password():
    assert parse_command('login admin') == LoginCommand(username='admin', password=None)
    assert parse_command('login admin s3cret!') == LoginCommand(username='admin', password='s3cret!')


def test_parse_login_rejects_extra_arguments():
    with pytest.raises(ParseError):
        parse_command('login a b c')


def test_parse_quoted_filenames():
    assert parse_command('download "holiday photo.jpg" ~/Pictures') == DownloadCommand(
        filename='holiday photo.jpg', dest_dir='~/Pictures'
    )
    assert parse_command("delete 'q3 report.pdf'") == DeleteCommand(filename='q3 report.pdf')


def test_parse_upload_optional_path():
    assert parse_command('upload') == UploadCommand(path=None)
    assert parse_command('upload ./a.txt') == UploadCommand(path='./a.txt')


def test_parse_select_and_cancel():
    assert parse_command('select notes.txt') == SelectCommand(path='notes.txt')
    assert parse_command('cancel') == CancelCommand()


def test_parse_is_case_insensitive_for_command_name():
    assert parse_command('LIST') == ListCommand()


def test_parse_no_arg_commands_reject_arguments():
    with pytest.raises(ParseError, match='list takes no arguments'):
        parse_command('list everything')


def test_parse_unknown_command():
    with pytest.raises(ParseError, match='Unknown command: frobnicate'):
        parse_command('frobnicate now')


def test_parse_empty_and_bad_quoting():
    with pytest.raises(ParseError, match='Empty command'):
        parse_command('   ')
    with pytest.raises(ParseError, match='Invalid syntax'):
        parse_command('delete "unterminated')
