"""Result shapes for ServerQuery resources.

Each model declares its fields' wire keys as aliases; decoding is done by
the generic mapper (ts3query.wire.mapper.load_record). Non-optional fields
fall back to their zero value when the server omits them. Fields that the
server only sends when asked for (e.g. the ``clientlist`` option flags) are
Optional, so "not requested" reads as None rather than zero.

Models:
    Server, CreatedServer, Group, PrivilegeKey, ServerConnectionInfo,
    Instance, Channel, OnlineClient, DBClient, Snapshot, Version, WhoAmI.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import Field

from ts3query.wire.mapper import (
    EPOCH,
    Bool01,
    Float,
    Int,
    IntList,
    Milliseconds,
    Seconds,
    Str,
    Timestamp,
    WireModel,
)


class Server(WireModel):
    """A virtual server, as listed by ``serverlist`` or described by ``serverinfo``."""

    id: Int = Field(0, alias="virtualserver_id")
    port: Int = Field(0, alias="virtualserver_port")
    status: Str = Field("", alias="virtualserver_status")
    clients_online: Int = Field(0, alias="virtualserver_clientsonline")
    query_clients_online: Int = Field(0, alias="virtualserver_queryclientsonline")
    max_clients: Int = Field(0, alias="virtualserver_maxclients")
    uptime: Seconds = Field(timedelta(0), alias="virtualserver_uptime")
    name: Str = Field("", alias="virtualserver_name")
    auto_start: Bool01 = Field(False, alias="virtualserver_autostart")
    machine_id: Str = Field("", alias="virtualserver_machine_id")
    unique_identifier: Str = Field("", alias="virtualserver_unique_identifier")

    # serverinfo only
    anti_flood_points_needed_command_block: Int = Field(
        0, alias="virtualserver_antiflood_points_needed_command_block"
    )
    anti_flood_points_needed_ip_block: Int = Field(
        0, alias="virtualserver_antiflood_points_needed_ip_block"
    )
    anti_flood_points_tick_reduce: Int = Field(0, alias="virtualserver_antiflood_points_tick_reduce")
    channel_temp_delete_delay_default: Int = Field(
        0, alias="virtualserver_channel_temp_delete_delay_default"
    )
    codec_encryption_mode: Int = Field(0, alias="virtualserver_codec_encryption_mode")
    complain_auto_ban_count: Int = Field(0, alias="virtualserver_complain_autoban_count")
    complain_auto_ban_time: Int = Field(0, alias="virtualserver_complain_autoban_time")
    complain_remove_time: Int = Field(0, alias="virtualserver_complain_remove_time")
    created: Timestamp = Field(EPOCH, alias="virtualserver_created")
    default_channel_admin_group: Int = Field(0, alias="virtualserver_default_channel_admin_group")
    default_channel_group: Int = Field(0, alias="virtualserver_default_channel_group")
    default_server_group: Int = Field(0, alias="virtualserver_default_server_group")
    download_quota: Int = Field(0, alias="virtualserver_download_quota")
    upload_quota: Int = Field(0, alias="virtualserver_upload_quota")
    file_base: Str = Field("", alias="virtualserver_filebase")
    flag_password: Bool01 = Field(False, alias="virtualserver_flag_password")
    host_banner_gfx_interval: Int = Field(0, alias="virtualserver_hostbanner_gfx_interval")
    host_banner_gfx_url: Str = Field("", alias="virtualserver_hostbanner_gfx_url")
    host_banner_mode: Int = Field(0, alias="virtualserver_hostbanner_mode")
    host_banner_url: Str = Field("", alias="virtualserver_hostbanner_url")
    host_button_gfx_url: Str = Field("", alias="virtualserver_hostbutton_gfx_url")
    host_button_tooltip: Str = Field("", alias="virtualserver_hostbutton_tooltip")
    host_button_url: Str = Field("", alias="virtualserver_hostbutton_url")
    host_message: Str = Field("", alias="virtualserver_hostmessage")
    host_message_mode: Int = Field(0, alias="virtualserver_hostmessage_mode")
    icon_id: Int = Field(0, alias="virtualserver_icon_id")
    log_channel: Bool01 = Field(False, alias="virtualserver_log_channel")
    log_client: Bool01 = Field(False, alias="virtualserver_log_client")
    log_file_transfer: Bool01 = Field(False, alias="virtualserver_log_filetransfer")
    log_permissions: Bool01 = Field(False, alias="virtualserver_log_permissions")
    log_query: Bool01 = Field(False, alias="virtualserver_log_query")
    log_server: Bool01 = Field(False, alias="virtualserver_log_server")
    max_download_total_bandwidth: Int = Field(0, alias="virtualserver_max_download_total_bandwidth")
    max_upload_total_bandwidth: Int = Field(0, alias="virtualserver_max_upload_total_bandwidth")
    min_android_version: Int = Field(0, alias="virtualserver_min_android_version")
    min_client_version: Int = Field(0, alias="virtualserver_min_client_version")
    min_ios_version: Int = Field(0, alias="virtualserver_min_ios_version")
    min_clients_in_channel_before_forced_silence: Int = Field(
        0, alias="virtualserver_min_clients_in_channel_before_forced_silence"
    )
    name_phonetic: Str = Field("", alias="virtualserver_name_phonetic")
    needed_identity_security_level: Int = Field(
        0, alias="virtualserver_needed_identity_security_level"
    )
    password: Str = Field("", alias="virtualserver_password")
    priority_speaker_dimm_modificator: Float = Field(
        0.0, alias="virtualserver_priority_speaker_dimm_modificator"
    )
    reserved_slots: Int = Field(0, alias="virtualserver_reserved_slots")
    weblist_enabled: Bool01 = Field(False, alias="virtualserver_weblist_enabled")
    welcome_message: Str = Field("", alias="virtualserver_welcomemessage")


class CreatedServer(WireModel):
    """Result of ``servercreate``: the new server and its admin token."""

    id: Int = Field(0, alias="sid")
    port: Int = Field(0, alias="virtualserver_port")
    token: Str = Field("", alias="token")


class Group(WireModel):
    """A server group."""

    id: Int = Field(0, alias="sgid")
    name: Str = Field("", alias="name")
    type: Int = Field(0, alias="type")
    icon_id: Int = Field(0, alias="iconid")
    saved: Bool01 = Field(False, alias="savedb")
    sort_id: Int = Field(0, alias="sortid")
    name_mode: Int = Field(0, alias="namemode")
    modify_power: Int = Field(0, alias="n_modifyp")
    member_add_power: Int = Field(0, alias="n_member_addp")
    member_remove_power: Int = Field(0, alias="n_member_removep")


class PrivilegeKey(WireModel):
    """A privilege key (token) that grants a group when redeemed."""

    token: Str = Field("", alias="token")
    type: Int = Field(0, alias="token_type")
    id1: Int = Field(0, alias="token_id1")
    id2: Int = Field(0, alias="token_id2")
    created: Timestamp = Field(EPOCH, alias="token_created")
    description: Str = Field("", alias="token_description")


class ServerConnectionInfo(WireModel):
    """Traffic counters of the selected virtual server."""

    file_transfer_bandwidth_sent: Int = Field(0, alias="connection_filetransfer_bandwidth_sent")
    file_transfer_bandwidth_received: Int = Field(
        0, alias="connection_filetransfer_bandwidth_received"
    )
    file_transfer_total_sent: Int = Field(0, alias="connection_filetransfer_bytes_sent_total")
    file_transfer_total_received: Int = Field(
        0, alias="connection_filetransfer_bytes_received_total"
    )
    packets_sent_total: Int = Field(0, alias="connection_packets_sent_total")
    bytes_sent_total: Int = Field(0, alias="connection_bytes_sent_total")
    packets_received_total: Int = Field(0, alias="connection_packets_received_total")
    bytes_received_total: Int = Field(0, alias="connection_bytes_received_total")
    bandwidth_sent_last_second: Int = Field(0, alias="connection_bandwidth_sent_last_second_total")
    bandwidth_sent_last_minute: Int = Field(0, alias="connection_bandwidth_sent_last_minute_total")
    bandwidth_received_last_second: Int = Field(
        0, alias="connection_bandwidth_received_last_second_total"
    )
    bandwidth_received_last_minute: Int = Field(
        0, alias="connection_bandwidth_received_last_minute_total"
    )
    connected_time: Int = Field(0, alias="connection_connected_time")
    packet_loss_total: Float = Field(0.0, alias="connection_packetloss_total")
    ping: Float = Field(0.0, alias="connection_ping")
    packets_sent_speech: Int = Field(0, alias="connection_packets_sent_speech")
    bytes_sent_speech: Int = Field(0, alias="connection_bytes_sent_speech")
    packets_received_speech: Int = Field(0, alias="connection_packets_received_speech")
    bytes_received_speech: Int = Field(0, alias="connection_bytes_received_speech")
    packets_sent_keepalive: Int = Field(0, alias="connection_packets_sent_keepalive")
    bytes_sent_keepalive: Int = Field(0, alias="connection_bytes_sent_keepalive")
    packets_received_keepalive: Int = Field(0, alias="connection_packets_received_keepalive")
    bytes_received_keepalive: Int = Field(0, alias="connection_bytes_received_keepalive")
    packets_sent_control: Int = Field(0, alias="connection_packets_sent_control")
    bytes_sent_control: Int = Field(0, alias="connection_bytes_sent_control")
    packets_received_control: Int = Field(0, alias="connection_packets_received_control")
    bytes_received_control: Int = Field(0, alias="connection_bytes_received_control")


class Instance(WireModel):
    """Settings of the server instance (``instanceinfo``)."""

    database_version: Int = Field(0, alias="serverinstance_database_version")
    file_transfer_port: Int = Field(0, alias="serverinstance_filetransfer_port")
    max_total_download_bandwidth: Int = Field(
        0, alias="serverinstance_max_download_total_bandwidth"
    )
    max_total_upload_bandwidth: Int = Field(0, alias="serverinstance_max_upload_total_bandwidth")
    guest_server_query_group: Int = Field(0, alias="serverinstance_guest_serverquery_group")
    server_query_flood_commands: Int = Field(0, alias="serverinstance_serverquery_flood_commands")
    server_query_flood_time: Seconds = Field(
        timedelta(0), alias="serverinstance_serverquery_flood_time"
    )
    server_query_ban_time: Seconds = Field(timedelta(0), alias="serverinstance_serverquery_ban_time")
    template_server_admin_group: Int = Field(0, alias="serverinstance_template_serveradmin_group")
    template_server_default_group: Int = Field(
        0, alias="serverinstance_template_serverdefault_group"
    )
    template_channel_admin_group: Int = Field(0, alias="serverinstance_template_channeladmin_group")
    template_channel_default_group: Int = Field(
        0, alias="serverinstance_template_channeldefault_group"
    )
    permissions_version: Int = Field(0, alias="serverinstance_permissions_version")
    pending_connections_per_ip: Int = Field(0, alias="serverinstance_pending_connections_per_ip")


class Channel(WireModel):
    """A channel on the selected virtual server."""

    id: Int = Field(0, alias="cid")
    parent_id: Int = Field(0, alias="pid")
    order: Int = Field(0, alias="channel_order")
    name: Str = Field("", alias="channel_name")
    total_clients: Int = Field(0, alias="total_clients")
    needed_subscribe_power: Int = Field(0, alias="channel_needed_subscribe_power")


class OnlineClient(WireModel):
    """A connected client (``clientlist``).

    Everything below ``away_message`` is only sent for the matching
    ``clientlist`` flag and is None otherwise.
    """

    id: Int = Field(0, alias="clid")
    channel_id: Int = Field(0, alias="cid")
    database_id: Int = Field(0, alias="client_database_id")
    nickname: Str = Field("", alias="client_nickname")
    type: Int = Field(0, alias="client_type")
    away: Bool01 = Field(False, alias="client_away")
    away_message: Str = Field("", alias="client_away_message")

    # -uid
    unique_identifier: Optional[Str] = Field(None, alias="client_unique_identifier")
    # -voice
    flag_talking: Optional[Bool01] = Field(None, alias="client_flag_talking")
    input_muted: Optional[Bool01] = Field(None, alias="client_input_muted")
    output_muted: Optional[Bool01] = Field(None, alias="client_output_muted")
    input_hardware: Optional[Bool01] = Field(None, alias="client_input_hardware")
    output_hardware: Optional[Bool01] = Field(None, alias="client_output_hardware")
    talk_power: Optional[Int] = Field(None, alias="client_talk_power")
    is_talker: Optional[Bool01] = Field(None, alias="client_is_talker")
    is_priority_speaker: Optional[Bool01] = Field(None, alias="client_is_priority_speaker")
    is_recording: Optional[Bool01] = Field(None, alias="client_is_recording")
    is_channel_commander: Optional[Bool01] = Field(None, alias="client_is_channel_commander")
    # -times
    idle_time: Optional[Milliseconds] = Field(None, alias="client_idle_time")
    created: Optional[Timestamp] = Field(None, alias="client_created")
    last_connected: Optional[Timestamp] = Field(None, alias="client_lastconnected")
    # -groups
    server_groups: Optional[IntList] = Field(None, alias="client_servergroups")
    channel_group_id: Optional[Int] = Field(None, alias="client_channel_group_id")
    channel_group_inherited_channel_id: Optional[Int] = Field(
        None, alias="client_channel_group_inherited_channel_id"
    )
    # -info
    version: Optional[Str] = Field(None, alias="client_version")
    platform: Optional[Str] = Field(None, alias="client_platform")
    # -icon, -country, -ip, -badges
    icon_id: Optional[Int] = Field(None, alias="client_icon_id")
    country: Optional[Str] = Field(None, alias="client_country")
    ip: Optional[Str] = Field(None, alias="connection_client_ip")
    badges: Optional[Str] = Field(None, alias="client_badges")


class DBClient(WireModel):
    """A client known to the server database (``clientdblist``)."""

    id: Int = Field(0, alias="cldbid")
    unique_identifier: Str = Field("", alias="client_unique_identifier")
    nickname: Str = Field("", alias="client_nickname")
    created: Timestamp = Field(EPOCH, alias="client_created")
    last_connected: Timestamp = Field(EPOCH, alias="client_lastconnected")
    total_connections: Int = Field(0, alias="client_totalconnections")
    description: Str = Field("", alias="client_description")
    last_ip: Str = Field("", alias="client_lastip")


class Snapshot(WireModel):
    """A server snapshot.

    ``data`` is kept in wire (escaped) form so that it can be handed to
    ``serversnapshotdeploy`` unchanged.
    """

    version: Int = Field(0, alias="version")
    data: Str = Field("", alias="data")


class Version(WireModel):
    """Server software version."""

    version: Str = Field("", alias="version")
    build: Int = Field(0, alias="build")
    platform: Str = Field("", alias="platform")


class WhoAmI(WireModel):
    """Identity and selection of the current query session."""

    server_status: Str = Field("", alias="virtualserver_status")
    server_id: Int = Field(0, alias="virtualserver_id")
    server_unique_identifier: Str = Field("", alias="virtualserver_unique_identifier")
    server_port: Int = Field(0, alias="virtualserver_port")
    client_id: Int = Field(0, alias="client_id")
    channel_id: Int = Field(0, alias="client_channel_id")
    nickname: Str = Field("", alias="client_nickname")
    database_id: Int = Field(0, alias="client_database_id")
    login_name: Str = Field("", alias="client_login_name")
    unique_identifier: Str = Field("", alias="client_unique_identifier")
    origin_server_id: Int = Field(0, alias="client_origin_server_id")
