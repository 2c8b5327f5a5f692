import pytest

from glcdcat.controllers import (
    ControllerRecord,
    controller_list_body,
    parse_controller_records,
    parse_vendor_names,
)
from glcdcat.errors import SchemaDriftError


def _row(name="ssd1306", tiles="16, 8", com="COM_I2C", vendors='{ { "128x64_noname" }, { NULL } }'):
    return (
        '  {\n'
        f'    "{name}", {tiles}, "u8g2_ll_hvline_vertical_top_lsb", "u8x8_cad_001", "", {com},\n'
        '    "", /* is_generate_u8g2_class= */ 1,\n'
        f'    {vendors}\n'
        '  },\n'
    )


class TestParseVendorNames:
    def test_names_are_uppercased_and_null_dropped(self):
        assert parse_vendor_names('{"128x64_noname"},{"128x64_vcomh0"},{NULL}') == ["128X64_NONAME", "128X64_VCOMH0"]

    @pytest.mark.parametrize("null", ['{NULL}', '{null}', '{"null"}', '{"Null"}'])
    def test_null_in_any_form_is_skipped(self, null):
        assert parse_vendor_names('{"a"},' + null + ',{"b"}') == ["A", "B"]

    def test_trailing_comma_is_ignored(self):
        assert parse_vendor_names('{"a"},') == ["A"]

    def test_empty_list(self):
        assert parse_vendor_names('') == []

    @pytest.mark.parametrize("token", ['"a"', '{}', '{""}', '{"a""b"}', '{"a}', '{a"}'])
    def test_malformed_entry_is_drift(self, token):
        with pytest.raises(SchemaDriftError, match="Unable to extract vendor name"):
            parse_vendor_names(token)

    def test_unbalanced_quote_is_drift(self):
        with pytest.raises(SchemaDriftError) as exc:
            parse_vendor_names('{"adafruit},{"generic"}')
        assert exc.value.fragment == '{"adafruit}'

    def test_bare_name_is_accepted(self):
        assert parse_vendor_names('{adafruit}') == ["ADAFRUIT"]


class TestParseControllerRecords:
    def test_single_record(self, single_record):
        records = parse_controller_records(single_record)
        assert records == [ControllerRecord(
            name="SSD1306",
            tile_width=1,
            tile_height=1,
            buffer_layout="horiz",
            cad="4wire",
            cad_short="4w",
            comms=("COM_I2C", "COM_4WSPI"),
            notes="nonotes",
            flag=0,
            vendors=("ADAFRUIT", "GENERIC"),
        )]

    def test_records_keep_source_order(self):
        block = _row("ssd1306") + _row("sh1106") + _row("ssd1306", com="COM_4WSPI")
        assert [r.name for r in parse_controller_records(block)] == ["SSD1306", "SH1106", "SSD1306"]

    def test_name_is_uppercased(self):
        assert parse_controller_records(_row("uc1701"))[0].name == "UC1701"

    def test_comm_order_and_duplicates_are_kept(self):
        record = parse_controller_records(_row(com="COM_I2C|COM_4WSPI|COM_I2C"))[0]
        assert record.comms == ("COM_I2C", "COM_4WSPI", "COM_I2C")

    def test_unknown_comm_token_is_kept(self):
        record = parse_controller_records(_row(com="COM_4WSPI|COM_FUTUREBUS"))[0]
        assert record.comms == ("COM_4WSPI", "COM_FUTUREBUS")

    def test_record_without_vendor_list(self):
        block = '{"ssd1306",16,8,"u8g2_ll_hvline_vertical_top_lsb","u8x8_cad_001","",COM_I2C,"",1}'
        record = parse_controller_records(block)[0]
        assert record.vendors == ()

    def test_commented_out_record_is_ignored(self):
        block = _row("ssd1306") + '  /*\n' + _row("sh1107") + '  */\n'
        assert [r.name for r in parse_controller_records(block)] == ["SSD1306"]

    def test_line_comment_between_records(self):
        block = _row("ssd1306") + '  // next one is special\n' + _row("sh1106")
        assert len(parse_controller_records(block)) == 2

    def test_struct_header_is_accepted(self):
        block = 'struct controller controller_list[] =\n{\n' + _row("ssd1306") + _row("sh1106") + '};\n'
        assert [r.name for r in parse_controller_records(block)] == ["SSD1306", "SH1106"]

    def test_empty_block(self):
        assert parse_controller_records('') == []

    def test_unrecognised_record_is_drift(self):
        # an extra field after the flag
        block = _row("ssd1306") + '{"sh1106",16,8,"x","u8x8_cad_001","",COM_I2C,"",1,2,{{"a"}}},'
        with pytest.raises(SchemaDriftError, match="Unrecognised text in controller list"):
            parse_controller_records(block)

    def test_vendor_entry_drift(self):
        with pytest.raises(SchemaDriftError):
            parse_controller_records(_row(vendors='{ "128x64_noname", { NULL } }'))

    def test_fixture_block(self, controller_block):
        records = parse_controller_records(controller_block)
        assert [r.name for r in records] == [
            "SSD1305", "SSD1305", "SSD1306", "SSD1306", "ST7920", "ST7920", "UC1701"]
        st7920 = records[5]
        assert (st7920.tile_width, st7920.tile_height) == (16, 8)
        assert st7920.cad == "u8x8_cad_st7920_spi"
        assert st7920.cad_short == "s"
        assert st7920.comms == ("COM_ST7920SPI",)
        assert st7920.notes == "Serialmodeonly"
        assert st7920.vendors == ("128X64",)


def test_controller_list_body_without_header_is_unchanged():
    assert controller_list_body('{"a"}') == '{"a"}'


def test_controller_list_body_strips_header():
    assert controller_list_body('structcontrollercontroller_list[]={{"a"}};') == '{"a"}'
