"""Tests for the command-line interface.

WHY: The CLI owns file handling, option precedence and exit codes, the
parts operators see directly. A wrong exit code breaks shell pipelines;
a leaked file handle loses the partial output.

HOW: Calls main() with explicit argv, using tmp_path for files and
capsysbinary for stdout/stderr.

RULES:
- All file I/O uses tmp_path
- Failures are asserted through SystemExit codes and stderr text
"""

import pytest

from people_converter.cli import build_parser, main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("PEOPLE_CONVERTER_CHARSET", raising=False)
    monkeypatch.delenv("PEOPLE_CONVERTER_ALLOW_DUPLICATE_INFO", raising=False)
    monkeypatch.delenv("PEOPLE_CONVERTER_ROOT_ELEMENT", raising=False)


@pytest.fixture
def input_file(tmp_path, sample_lines):
    path = tmp_path / "people.txt"
    path.write_text("\r\n".join(sample_lines), encoding="utf-8")
    return path


class TestParser:
    """build_parser exposes the documented arguments."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.input_file is None
        assert args.output_file is None
        assert args.allow_duplicate is None
        assert args.allow_duplicate_info is None
        assert args.encoding is None
        assert args.verbose is False

    def test_positionals(self):
        args = build_parser().parse_args(["in.txt", "out.xml", "1"])
        assert args.input_file == "in.txt"
        assert args.output_file == "out.xml"
        assert args.allow_duplicate == "1"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert "people_converter" in capsys.readouterr().out


class TestConversion:
    """Successful conversions to files and stdout."""

    def test_sample_data_to_stdout(self, capsysbinary, expected_sample_xml):
        main([])
        captured = capsysbinary.readouterr()
        assert captured.out.decode("utf-8") == expected_sample_xml
        assert b"Using test data as input:" in captured.err

    def test_file_to_file(self, input_file, tmp_path, expected_sample_xml, capsysbinary):
        output = tmp_path / "people.xml"
        main([str(input_file), str(output)])
        assert output.read_text(encoding="utf-8") == expected_sample_xml
        assert b"Wrote 2 person(s)" in capsysbinary.readouterr().err

    def test_file_to_stdout_with_dash(self, input_file, capsysbinary, expected_sample_xml):
        main([str(input_file), "-"])
        assert capsysbinary.readouterr().out.decode("utf-8") == expected_sample_xml

    def test_encoding_applies_to_input_and_output(self, tmp_path):
        source = tmp_path / "latin.txt"
        source.write_bytes("P|Åsa|Öberg\n".encode("iso-8859-1"))
        output = tmp_path / "latin.xml"
        main([str(source), str(output), "--encoding", "iso-8859-1"])
        assert "<firstname>Åsa</firstname>".encode("iso-8859-1") in output.read_bytes()

    def test_custom_root_element(self, input_file, tmp_path):
        output = tmp_path / "out.xml"
        main([str(input_file), str(output), "--root-element", "register"])
        text = output.read_text(encoding="utf-8")
        assert text.startswith("<register>\n")
        assert text.endswith("</register>\n")


class TestDuplicatePolicy:
    """Legacy positional and flag control duplicate tolerance."""

    @pytest.fixture
    def duplicate_input(self, tmp_path):
        path = tmp_path / "dup.txt"
        path.write_text("P|Elof|Sundin\nT|1|2\nT|3|4\n", encoding="utf-8")
        return path

    def test_duplicate_fails_by_default(self, duplicate_input, tmp_path, capsysbinary):
        output = tmp_path / "out.xml"
        with pytest.raises(SystemExit) as excinfo:
            main([str(duplicate_input), str(output)])
        assert excinfo.value.code == 1
        assert b"Bad format on line 3: Duplicate error" in capsysbinary.readouterr().err
        # Partial output stays behind without the closing root tag
        assert output.read_text(encoding="utf-8") == "<people>\n"

    def test_legacy_positional_allows_duplicates(self, duplicate_input, tmp_path):
        output = tmp_path / "out.xml"
        main([str(duplicate_input), str(output), "true"])
        assert "<mobile>3</mobile>" in output.read_text(encoding="utf-8")

    def test_flag_allows_duplicates(self, duplicate_input, tmp_path):
        output = tmp_path / "out.xml"
        main([str(duplicate_input), str(output), "--allow-duplicate-info"])
        assert "<mobile>3</mobile>" in output.read_text(encoding="utf-8")

    def test_negative_flag_overrides_positional(self, duplicate_input, tmp_path):
        output = tmp_path / "out.xml"
        with pytest.raises(SystemExit):
            main([str(duplicate_input), str(output), "1", "--no-allow-duplicate-info"])

    def test_environment_default(self, duplicate_input, tmp_path, monkeypatch):
        monkeypatch.setenv("PEOPLE_CONVERTER_ALLOW_DUPLICATE_INFO", "1")
        output = tmp_path / "out.xml"
        main([str(duplicate_input), str(output)])
        assert "<mobile>3</mobile>" in output.read_text(encoding="utf-8")


class TestErrors:
    """Errors print a message and exit with status 1."""

    def test_missing_input_file(self, tmp_path, capsysbinary):
        missing = tmp_path / "nope.txt"
        with pytest.raises(SystemExit) as excinfo:
            main([str(missing)])
        assert excinfo.value.code == 1
        err = capsysbinary.readouterr().err.decode("utf-8")
        assert "Error: Input file not found: {}".format(missing) in err

    def test_missing_input_does_not_create_output(self, tmp_path):
        output = tmp_path / "out.xml"
        with pytest.raises(SystemExit):
            main([str(tmp_path / "nope.txt"), str(output)])
        assert not output.exists()

    def test_unknown_encoding(self, input_file, capsysbinary):
        with pytest.raises(SystemExit) as excinfo:
            main([str(input_file), "--encoding", "no-such-charset"])
        assert excinfo.value.code == 1
        assert b"Unknown charset" in capsysbinary.readouterr().err

    def test_undecodable_input(self, tmp_path, capsysbinary):
        source = tmp_path / "bad.txt"
        source.write_bytes(b"P|\xff\xfe\n")
        with pytest.raises(SystemExit) as excinfo:
            main([str(source), str(tmp_path / "out.xml")])
        assert excinfo.value.code == 1
        assert b"Error: Input is not valid utf-8" in capsysbinary.readouterr().err

    def test_structural_error_message(self, tmp_path, capsysbinary):
        source = tmp_path / "bad.txt"
        source.write_text("T|073-101801\n", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(source), str(tmp_path / "out.xml")])
        assert excinfo.value.code == 1
        assert capsysbinary.readouterr().err.strip() == (
            b"Bad format on line 1: Phone row appeared before Person row"
        )

    def test_xml_invalid_character_is_a_format_error(self, tmp_path, capsysbinary):
        source = tmp_path / "control.txt"
        source.write_text("P|Elof\x0bX|Sundin\nP|Boris\n", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(source), str(tmp_path / "out.xml")])
        assert excinfo.value.code == 1
        assert capsysbinary.readouterr().err.strip() == (
            b"Bad format on line 1: Character U+000B is not allowed in XML"
        )
