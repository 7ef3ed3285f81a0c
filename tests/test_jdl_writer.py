# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import pytest

from acceff_lib.jdl import JDLWriter


def test_jdl_writer_single_string_value_is_quoted():
    jdl = JDLWriter()
    jdl.output("Executable", "/alice/bin/aliroot_new")

    assert jdl.getText() == 'Executable = "/alice/bin/aliroot_new";\n'


def test_jdl_writer_single_integer_value_is_bare():
    jdl = JDLWriter()
    jdl.output("TTL", "72000")
    jdl.output("Price", 1)

    assert jdl.getText() == "TTL = 72000;\nPrice = 1;\n"


def test_jdl_writer_mixed_value_is_quoted():
    jdl = JDLWriter()
    jdl.output("Workdirectorysize", "5000MB")

    assert jdl.getText() == 'Workdirectorysize = "5000MB";\n'


def test_jdl_writer_multiple_values_make_list():
    jdl = JDLWriter()
    jdl.output("Packages", "VO_ALICE@AliRoot::v5-03-Rev-18", "VO_ALICE@GEANT3::v1-14-8")

    assert jdl.getText() == (
        "Packages = {\n"
        '\t"VO_ALICE@AliRoot::v5-03-Rev-18",\n'
        '\t"VO_ALICE@GEANT3::v1-14-8"\n'
        "};\n"
    )


def test_jdl_writer_empty_values_are_ignored():
    jdl = JDLWriter()
    jdl.output("Packages", "VO_ALICE@AliRoot::v5-03-Rev-18", "")

    assert jdl.getText() == 'Packages = "VO_ALICE@AliRoot::v5-03-Rev-18";\n'


def test_jdl_writer_no_value_raises():
    jdl = JDLWriter()

    with pytest.raises(ValueError, match="No value provided for JDL key 'Price'"):
        jdl.output("Price", "")


def test_jdl_writer_comment():
    jdl = JDLWriter()
    jdl.comment("$1 = run number")

    assert jdl.getText() == "# $1 = run number\n"
