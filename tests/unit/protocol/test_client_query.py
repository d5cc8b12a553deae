"""Unit tests for $CQ client queries."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from fsd_messages.protocol.aircraft_config import AircraftConfig
from fsd_messages.protocol.client_query import (
    AcceptHandoffQuery,
    AircraftConfigRequestQuery,
    AircraftConfigResponseQuery,
    CancelHelpRequestQuery,
    ClientQueryMessage,
    Com1FrequencyQuery,
    ForceBeaconCodeQuery,
    HelpRequestQuery,
    NewAtisQuery,
    NewInfoQuery,
    SetScratchpadQuery,
    SetTempAltitudeQuery,
    SetVoiceTypeQuery,
    SimTimeQuery,
    WhoHasQuery,
)
from fsd_messages.protocol.enums import VoiceCapability
from fsd_messages.protocol.exceptions import (
    InvalidAircraftConfig,
    InvalidClientQueryType,
    InvalidFieldCount,
    InvalidNewAtisMessage,
    InvalidTime,
    InvalidTransponderCode,
)
from fsd_messages.protocol.primitives import TransponderCode
from fsd_messages.protocol.scratchpad import Heading, Stand
from tests.fixtures.real_lines import (
    CQ_AIRCRAFT_CONFIG_REQUEST,
    CQ_AIRCRAFT_CONFIG_RESPONSE,
    CQ_FORCE_BEACON_CODE,
    CQ_NEW_ATIS,
    CQ_WHO_HAS,
)

# Test constants
SQUAWK_2200 = 2200
FL120_FEET = 12000
SIM_TIME = datetime(2023, 10, 19, 12, 30, 5, tzinfo=UTC)


def decode(line: str) -> ClientQueryMessage:
    return ClientQueryMessage.from_fields(line.split(":"))


@pytest.mark.unit
def test_who_has_round_trip() -> None:
    """Test a who-has query decodes and re-encodes unchanged."""
    message = decode(CQ_WHO_HAS)

    assert message.sender == "EHAM_GND"
    assert message.recipient == "@94835"
    assert message.query == WhoHasQuery("KLM167")
    assert message.to_line() == CQ_WHO_HAS


@pytest.mark.unit
def test_who_has_constructor() -> None:
    """Test the convenience constructor normalises callsigns."""
    assert ClientQueryMessage.who_has("eham_gnd", "@94835", "klm167").to_line() == CQ_WHO_HAS


@pytest.mark.unit
@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("$CQBAW123:EGPH_APP:C?", ClientQueryMessage.com_1_freq("BAW123", "EGPH_APP")),
        ("$CQBAW123:SERVER:IP", ClientQueryMessage.public_ip("BAW123", "SERVER")),
        ("$CQBAW123:EGPH_ATIS:ATIS", ClientQueryMessage.atis("BAW123", "EGPH_ATIS")),
        ("$CQBAW123:EGPH_APP:RN", ClientQueryMessage.real_name("BAW123", "EGPH_APP")),
        ("$CQBAW123:SERVER:SV", ClientQueryMessage.server("BAW123", "SERVER")),
        ("$CQBAW123:EGPH_APP:CAPS", ClientQueryMessage.capabilities("BAW123", "EGPH_APP")),
        ("$CQEGPH_APP:BAW123:INF", ClientQueryMessage.client_information("EGPH_APP", "BAW123")),
        ("$CQEGPH_APP:@94835:BY", ClientQueryMessage.request_relief("EGPH_APP", "@94835")),
        ("$CQEGPH_APP:@94835:HI", ClientQueryMessage.cancel_request_relief("EGPH_APP", "@94835")),
        ("$CQEGPH_APP:SERVER:ATC:EGPH_TWR", ClientQueryMessage.is_valid_atc("EGPH_APP", "SERVER", "EGPH_TWR")),
        ("$CQEGPH_APP:SERVER:FP:BAW123", ClientQueryMessage.flight_plan("EGPH_APP", "SERVER", "BAW123")),
        ("$CQEGPH_APP:@94835:IT:BAW123", ClientQueryMessage.initiate_track("EGPH_APP", "@94835", "BAW123")),
        ("$CQEGPH_APP:@94835:DR:BAW123", ClientQueryMessage.drop_track("EGPH_APP", "@94835", "BAW123")),
        (
            "$CQEGPX_CTR:@94835:HT:BAW123:EGPH_APP",
            ClientQueryMessage.accept_handoff("EGPX_CTR", "@94835", "BAW123", "EGPH_APP"),
        ),
        (
            "$CQEGPH_APP:@94835:FA:BAW123:35000",
            ClientQueryMessage.set_final_altitude("EGPH_APP", "@94835", "BAW123", 35000),
        ),
        (
            "$CQEGPH_APP:@94835:BC:BAW123:4712",
            ClientQueryMessage.set_beacon_code("EGPH_APP", "@94835", "BAW123", TransponderCode(4712)),
        ),
        (
            "$CQEGPH_APP:@94835:SC:BAW123:GRP/S/A12",
            ClientQueryMessage.set_scratchpad("EGPH_APP", "@94835", "BAW123", Stand("A12")),
        ),
        (
            "$CQEGPH_APP:@94835:VT:BAW123:v",
            ClientQueryMessage.set_voice_type("EGPH_APP", "@94835", "BAW123", VoiceCapability.VOICE),
        ),
        ("$CQBAW123:EGPH_APP:HLP", ClientQueryMessage.help_request("BAW123", "EGPH_APP")),
        ("$CQBAW123:EGPH_APP:NOHLP", ClientQueryMessage.cancel_help_request("BAW123", "EGPH_APP")),
        ("$CQEGPH_ATIS:@94835:NEWINFO:B", ClientQueryMessage.new_info("EGPH_ATIS", "@94835", "B")),
        ("$CQSERVER:BAW123:SIMTIME:20231019123005", ClientQueryMessage.sim_time("SERVER", "BAW123", SIM_TIME)),
    ],
)
def test_query_round_trip(line: str, message: ClientQueryMessage) -> None:
    """Test each query kind decodes to its record and encodes back."""
    assert decode(line) == message
    assert message.to_line() == line


@pytest.mark.unit
def test_temp_altitude_accepts_flight_level() -> None:
    """Test altitude queries read flight levels and write feet."""
    message = decode("$CQEGPH_APP:@94835:TA:BAW123:FL120")

    assert message.query == SetTempAltitudeQuery("BAW123", FL120_FEET)
    assert message.to_line() == "$CQEGPH_APP:@94835:TA:BAW123:12000"


@pytest.mark.unit
def test_scratchpad_query_parses_contents() -> None:
    """Test scratchpad contents are interpreted."""
    assert decode("$CQEGPH_APP:@94835:SC:baw123:H270").query == SetScratchpadQuery("BAW123", Heading(270))


@pytest.mark.unit
def test_voice_type_query() -> None:
    """Test voice type letters are read case-insensitively."""
    assert decode("$CQEGPH_APP:@94835:VT:BAW123:T").query == SetVoiceTypeQuery("BAW123", VoiceCapability.TEXT)


@pytest.mark.unit
def test_beacon_code_rejects_invalid_squawk() -> None:
    """Test assigned squawks are validated."""
    with pytest.raises(InvalidTransponderCode):
        decode("$CQEGPH_APP:@94835:BC:BAW123:7800")


@pytest.mark.unit
def test_help_request_with_message() -> None:
    """Test help requests keep their free-text message."""
    assert decode("$CQBAW123:EGPH_APP:HLP:Engine failure: need vectors").query == HelpRequestQuery(
        "Engine failure: need vectors"
    )
    assert decode("$CQBAW123:EGPH_APP:NOHLP:").query == CancelHelpRequestQuery(None)


class TestForceBeaconCode:
    """Tests for the IPC squawk write."""

    @pytest.mark.unit
    def test_decode_bcd(self) -> None:
        """Test the BCD value is converted to a squawk."""
        message = decode(CQ_FORCE_BEACON_CODE)

        assert message.query == ForceBeaconCodeQuery(TransponderCode(SQUAWK_2200))
        assert message.to_line() == CQ_FORCE_BEACON_CODE

    @pytest.mark.unit
    def test_constructor(self) -> None:
        """Test the convenience constructor writes BCD."""
        message = ClientQueryMessage.force_beacon_code("SERVER", "BAW123", TransponderCode(SQUAWK_2200))

        assert message.to_line() == CQ_FORCE_BEACON_CODE

    @pytest.mark.unit
    def test_wrong_offset(self) -> None:
        """Test other IPC writes are not recognised."""
        with pytest.raises(InvalidClientQueryType) as exc_info:
            decode("$CQSERVER:BAW123:IPC:W:853:8704")

        assert exc_info.value.raw == "IPC:W:853:8704"

    @pytest.mark.unit
    def test_read_command(self) -> None:
        """Test IPC reads are not recognised."""
        with pytest.raises(InvalidClientQueryType):
            decode("$CQSERVER:BAW123:IPC:R:852:8704")

    @pytest.mark.unit
    def test_too_few_fields(self) -> None:
        """Test the IPC write needs six fields."""
        with pytest.raises(InvalidFieldCount) as exc_info:
            decode("$CQSERVER:BAW123:IPC:W:852")

        assert exc_info.value.expected == 6  # noqa: PLR2004
        assert exc_info.value.found == 5  # noqa: PLR2004

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["10240", "8864", "abc"])
    def test_invalid_bcd(self, value: str) -> None:
        """Test BCD values holding digits above 7 or hex nibbles are rejected."""
        with pytest.raises(InvalidTransponderCode):
            decode(f"$CQSERVER:BAW123:IPC:W:852:{value}")


class TestNewAtis:
    """Tests for NEWATIS and NEWINFO."""

    @pytest.mark.unit
    def test_decode(self) -> None:
        """Test the letter, wind and pressure are extracted."""
        message = decode(CQ_NEW_ATIS)

        assert message.query == NewAtisQuery("N", "31016KT", "Q986")
        assert message.to_line() == CQ_NEW_ATIS

    @pytest.mark.unit
    def test_decode_without_padding(self) -> None:
        """Test the weather part is read without its leading spaces."""
        message = decode("$CQESSA_A_ATIS:@94835:NEWATIS:ATIS n:31016KT - Q986")

        assert message.query == NewAtisQuery("N", "31016KT", "Q986")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "weather",
        ["  310KT - Q986", "  31016KT - Q98", "  31016KT", ""],
    )
    def test_invalid_weather(self, weather: str) -> None:
        """Test short wind or pressure tokens are rejected."""
        with pytest.raises(InvalidNewAtisMessage):
            decode(f"$CQESSA_A_ATIS:@94835:NEWATIS:ATIS N:{weather}")

    @pytest.mark.unit
    def test_invalid_letter(self) -> None:
        """Test the ATIS letter must be A-Z."""
        with pytest.raises(InvalidNewAtisMessage):
            decode("$CQESSA_A_ATIS:@94835:NEWATIS:ATIS 1:  31016KT - Q986")

    @pytest.mark.unit
    def test_too_few_fields(self) -> None:
        """Test NEWATIS needs the weather field."""
        with pytest.raises(InvalidFieldCount):
            decode("$CQESSA_A_ATIS:@94835:NEWATIS:ATIS N")

    @pytest.mark.unit
    def test_new_info(self) -> None:
        """Test NEWINFO carries the letter alone."""
        assert decode("$CQEGPH_ATIS:@94835:NEWINFO:c").query == NewInfoQuery("C")


class TestAircraftConfig:
    """Tests for ACC requests and responses."""

    @pytest.mark.unit
    def test_request(self) -> None:
        """Test a full-snapshot request."""
        message = decode(CQ_AIRCRAFT_CONFIG_REQUEST)

        assert message.query == AircraftConfigRequestQuery()
        assert message.to_line() == CQ_AIRCRAFT_CONFIG_REQUEST
        assert ClientQueryMessage.aircraft_config_request("BAW123", "EZY12") == message

    @pytest.mark.unit
    def test_response_rejoins_json(self) -> None:
        """Test the JSON payload survives being split on its colons."""
        message = decode(CQ_AIRCRAFT_CONFIG_RESPONSE)

        assert isinstance(message.query, AircraftConfigResponseQuery)
        assert message.query.config.gear_down is True
        assert message.to_line() == CQ_AIRCRAFT_CONFIG_RESPONSE

    @pytest.mark.unit
    def test_response_constructor(self) -> None:
        """Test a config built in code is wrapped on encode."""
        message = ClientQueryMessage.aircraft_config_response("BAW123", "EZY12", AircraftConfig(on_ground=True))

        assert message.to_line() == '$CQBAW123:EZY12:ACC:{"config":{"on_ground":true}}'

    @pytest.mark.unit
    def test_invalid_payload(self) -> None:
        """Test a malformed payload is rejected."""
        with pytest.raises(InvalidAircraftConfig):
            decode("$CQEZY12:BAW123:ACC:{broken")


class TestSimTime:
    """Tests for SIMTIME."""

    @pytest.mark.unit
    def test_encode_converts_to_utc(self) -> None:
        """Test a non-UTC time is written in UTC."""
        query = SimTimeQuery(datetime.fromisoformat("2023-10-19T14:30:05+02:00"))

        assert query.to_text() == "SIMTIME:20231019123005"

    @pytest.mark.unit
    def test_naive_time_is_utc(self) -> None:
        """Test a time without a zone is written as given, not shifted by the local zone."""
        query = SimTimeQuery(datetime(2024, 1, 1, 12))  # noqa: DTZ001

        assert query.time.tzinfo is UTC
        assert query.to_text() == "SIMTIME:20240101120000"

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["2023", "2023-10-19T12:00", "not a time"])
    def test_invalid_time(self, text: str) -> None:
        """Test malformed times are rejected."""
        with pytest.raises(InvalidTime):
            decode(f"$CQSERVER:BAW123:SIMTIME:{text}")


@pytest.mark.unit
def test_accept_handoff_requires_both_callsigns() -> None:
    """Test HT needs the aircraft and the controller."""
    with pytest.raises(InvalidFieldCount):
        decode("$CQEGPX_CTR:@94835:HT:BAW123")
    assert AcceptHandoffQuery("baw123", "egph_app").to_text() == "HT:BAW123:EGPH_APP"


@pytest.mark.unit
def test_subject_query_requires_subject() -> None:
    """Test subject queries need field 3."""
    with pytest.raises(InvalidFieldCount):
        decode("$CQEHAM_GND:@94835:WH")


@pytest.mark.unit
def test_unknown_tag() -> None:
    """Test an unknown query tag names the tag."""
    with pytest.raises(InvalidClientQueryType) as exc_info:
        decode("$CQBAW123:SERVER:TELEPORT:EGLL")

    assert exc_info.value.raw == "TELEPORT"


@pytest.mark.unit
def test_query_needs_tag() -> None:
    """Test a query line needs at least the tag field."""
    with pytest.raises(InvalidFieldCount):
        decode("$CQBAW123:SERVER")


@pytest.mark.unit
def test_bare_query_ignores_extra_fields() -> None:
    """Test bare queries ignore anything after the tag."""
    assert decode("$CQBAW123:EGPH_APP:C?:extra").query == Com1FrequencyQuery()
