"""Variable registry.

Maps variable ids to human-readable descriptions and back. The descriptions
come from the meter vendor and from various online sources; ids the meter was
seen answering without a known meaning carry UNKNOWN_VARIABLE_DESCRIPTION.

Two registries exist:

    - "full": every known entry
    - "responding": the same entries without the variables the meter answers
      with the unknown variable response (1045, 1084, 1085)

Lookups scan the whole table and the last match wins, so a later entry
overrides an earlier one with the same id.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

UNDEFINED_DESCRIPTION = "Undefined"

UNKNOWN_VARIABLE_DESCRIPTION = "Meter response seen, variable unknown"

# Variables the meter answers with the unknown variable response
UNRESPONSIVE_VARIABLES = frozenset((1045, 1084, 1085))


@dataclass(frozen=True)
class VariableEntry:
    """One registry entry."""

    id: int
    description: str


_VARIABLE_DEFINITIONS: tuple[tuple[int, str], ...] = (
    (0, "Load profile logger"),
    (1, "Active energy A14"),
    (2, "Active energy A23"),
    (3, "Reactive energy R12"),
    (4, "Reactive energy R34"),
    (5, "Reactive energy R1"),
    (6, "Reactive energy R4"),
    (7, "Secondary active energy A14"),
    (8, "Secondary active energy A23"),
    (9, "Secondary reactive energy R12"),
    (10, "Secondary reactive energy R34"),
    (11, "Secondary reactive energy R1"),
    (12, "Secondary reactive energy R4"),
    (13, "Active energy A14, verification"),
    (14, "Active energy A23, verification"),
    (15, "Reactive energy R12, verification"),
    (16, "Reactive energy R34, verification"),
    (17, "Resettable counter A14"),
    (18, "Resettable counter A23"),
    (19, "Active energy A14 Tariff 1"),
    (20, "Active energy A23 Tariff 1"),
    (21, "Reactive energy R12 Tariff 1"),
    (22, "Reactive energy R34 Tariff 1"),
    (23, "Active energy A14 Tariff 2"),
    (24, "Active energy A23 Tariff 2"),
    (25, "Reactive energy R12 Tariff 2"),
    (26, "Reactive energy R34 Tariff 2"),
    (27, "Active energy A14 Tariff 3"),
    (28, "Active energy A23 Tariff 3"),
    (29, "Reactive energy R12 Tariff 3"),
    (30, "Reactive energy R34 Tariff 3"),
    (31, "Active energy A14 Tariff 4"),
    (32, "Active energy A23 Tariff 4"),
    (33, "Reactive energy R12 Tariff 4"),
    (34, "Reactive energy R34 Tariff 4"),
    (35, "Average power P+"),
    (36, "Average power P-"),
    (37, "Average power Q1Q2"),
    (38, "Average power Q3O4"),
    (39, "Max power P14"),
    (40, "Max power P23"),
    (41, "Max power Q12"),
    (42, "Max power Q34"),
    (43, "Accumulated max power P14"),
    (44, "Accumulated max power P23"),
    (45, "Accumulated max power Q12"),
    (46, "Accumulated max power Q34"),
    (47, "Number of debiting periods"),
    (48, "Transformer ratio (x/5A)"),
    (50, "Meter status"),
    (51, "Meter number 1"),
    (52, "Meter number 2"),
    (53, "Meter number 3"),
    (54, "Configurations number 1"),
    (55, "Configurations number 2"),
    (56, "Configurations number 3"),
    (57, "Special Data 1"),
    (58, "Pulse input"),
    (199, "Load profile logger interval"),
    (222, "ConfigChangedEventCount"),
    (231, "IncrementConfigChangeEventCount"),
    (1001, "Serial number"),
    (1002, "Clock"),
    (1003, "Date"),
    (1004, "Hour counter"),
    (1005, "Software revision"),
    (1010, "Total meter number"),
    (1021, "Special Data 2"),
    (1023, "Actual power P14"),
    (1024, "Actual power P23"),
    (1025, "Actual power Q12"),
    (1026, "Actual power Q34"),
    (1027, "Time stamp active max power, P+max"),
    (1028, "Date active max power, P+max"),
    (1029, "Configurations number 4"),
    (1030, "Internal number"),
    (1031, "Active energy A1234"),
    (1032, "Operation mode"),
    (1033, "Max power P14 Tariff 1"),
    (1034, "Max power P14 Tariff 1 clock"),
    (1035, "Max power P14 Tariff 1 date"),
    (1036, "Max power P14 Tariff 2"),
    (1037, "Max power P14 Tariff 2 clock"),
    (1038, "Max power P14 Tariff 2 date"),
    (1039, "Power threshold value"),
    (1040, "Power threshold counter"),
    (1043, "Clock 2"),
    (1044, "Date 2"),
    (1045, "RTC status"),
    (1046, "VCOCCO status"),
    (1047, "RTC"),
    (1048, "RTC 2"),
    (1049, "Max power P14 RTC"),
    (1050, "Max power P14 Tariff 1 RTC"),
    (1051, "Max power P14 Tariff 2 RTC"),
    (1054, "Voltage L1"),
    (1055, "Voltage L2"),
    (1056, "Voltage L3"),
    (1058, "Type number"),
    (1059, "Active energy A14 Tariff 5"),
    (1060, "Active energy A14 Tariff 6"),
    (1061, "Active energy A14 Tariff 7"),
    (1062, "Active energy A14 Tariff 8"),
    (1063, "Active energy A23 Tariff 5"),
    (1064, "Active energy A23 Tariff 6"),
    (1065, "Active energy A23 Tariff 7"),
    (1066, "Active energy A23 Tariff 8"),
    (1067, "Reactive energy R12 Tariff 5"),
    (1068, "Reactive energy R12 Tariff 6"),
    (1069, "Reactive energy R12 Tariff 7"),
    (1070, "Reactive energy R12 Tariff 8"),
    (1071, "Reactive energy R34 Tariff 5"),
    (1072, "Reactive energy R34 Tariff 6"),
    (1073, "Reactive energy R34 Tariff 7"),
    (1074, "Reactive energy R34 Tariff 8"),
    (1075, "Configurations number 5"),
    (1076, "Current L1"),
    (1077, "Current L2"),
    (1078, "Current L3"),
    (1079, "Internal meter temperature"),
    (1080, "Actual power P14 L1"),
    (1081, "Actual power P14 L2"),
    (1082, "Actual power P14 L3"),
    (1083, "ROM checksum"),
    (1084, "Voltage extremity"),
    (1085, "Voltage event"),
    (1086, "Logger status"),
    (1087, "Connection status"),
    (1088, "Connection feedback"),
    (1089, "EPU state L1"),
    (1090, "EPU state L2"),
    (1091, "EPU state L3"),
    (1092, "EPU reset counter"),
    (1101, "Module port UART setup"),
    (1102, "Module port I/O configuration"),
    (1108, UNKNOWN_VARIABLE_DESCRIPTION),
    (1109, UNKNOWN_VARIABLE_DESCRIPTION),
    (1110, UNKNOWN_VARIABLE_DESCRIPTION),
    (1111, UNKNOWN_VARIABLE_DESCRIPTION),
    (1112, UNKNOWN_VARIABLE_DESCRIPTION),
    (1113, UNKNOWN_VARIABLE_DESCRIPTION),
    (1114, UNKNOWN_VARIABLE_DESCRIPTION),
    (1115, UNKNOWN_VARIABLE_DESCRIPTION),
    (1116, UNKNOWN_VARIABLE_DESCRIPTION),
    (1117, "Switching on"),
    (1118, UNKNOWN_VARIABLE_DESCRIPTION),
    (1119, UNKNOWN_VARIABLE_DESCRIPTION),
    (1120, UNKNOWN_VARIABLE_DESCRIPTION),
    (1121, UNKNOWN_VARIABLE_DESCRIPTION),
    (1122, UNKNOWN_VARIABLE_DESCRIPTION),
    (1123, "OBISBitmap"),
    (1124, "PushButton Control"),
    (1125, "PushButton Status"),
    (1126, "Unified typenumber"),
    (1127, "Max power Q12 RTC"),
    (1128, "Max power Q12 time"),
    (1129, "Max power Q12 date"),
    (1130, "Max power Q12 Tariff 1"),
    (1131, "Max power Q12 Tariff 1 RTC"),
    (1132, "Max power Q12 Tariff 1 time"),
    (1133, "Max power Q12 Tariff 1 date"),
    (1134, "Max power Q12 Tariff 2"),
    (1135, "Max power Q12 Tariff 2 RTC"),
    (1136, "Max power Q12 Tariff 2 time"),
    (1137, "Max power Q12 Tariff 2 date"),
    (1138, "Secondary active energy A14 Tariff 1"),
    (1139, "Secondary active energy A14 Tariff 2"),
    (1140, "Secondary active energy A14 Tariff 3"),
    (1141, "Secondary active energy A14 Tariff 4"),
    (1142, "Secondary active energy A14 Tariff 5"),
    (1143, "Secondary active energy A14 Tariff 6"),
    (1144, "Secondary active energy A14 Tariff 7"),
    (1145, "Secondary active energy A14 Tariff 8"),
    (1146, "Secondary active energy A23 Tariff 1"),
    (1147, "Secondary active energy A23 Tariff 2"),
    (1148, "Secondary active energy A23 Tariff 3"),
    (1149, "Secondary active energy A23 Tariff 4"),
    (1150, "Secondary active energy A23 Tariff 5"),
    (1151, "Secondary active energy A23 Tariff 6"),
    (1152, "Secondary active energy A23 Tariff 7"),
    (1153, "Secondary active energy A23 Tariff 8"),
    (1154, "Secondary reactive energy R12 Tariff 1"),
    (1155, "Secondary reactive energy R12 Tariff 2"),
    (1156, "Secondary reactive energy R12 Tariff 3"),
    (1157, "Secondary reactive energy R12 Tariff 4"),
    (1158, "Secondary reactive energy R12 Tariff 5"),
    (1159, "Secondary reactive energy R12 Tariff 6"),
    (1160, "Secondary reactive energy R12 Tariff 7"),
    (1161, "Secondary reactive energy R12 Tariff 8"),
    (1162, "Secondary reactive energy R34 Tariff 1"),
    (1163, "Secondary reactive energy R34 Tariff 2"),
    (1164, "Secondary reactive energy R34 Tariff 3"),
    (1165, "Secondary reactive energy R34 Tariff 4"),
    (1166, "Secondary reactive energy R34 Tariff 5"),
    (1167, "Secondary reactive energy R34 Tariff 6"),
    (1168, "Secondary reactive energy R34 Tariff 7"),
    (1169, "Secondary reactive energy R34 Tariff 8"),
    (1170, "Power factor L1"),
    (1171, "Power factor L2"),
    (1172, "Power factor L3"),
    (1173, "Total power factor"),
    (1174, "Transformer ratio before"),
    (1175, "Debit 2 loggerinterval"),
    (1179, "Transformer ratio lock"),
    (1180, UNKNOWN_VARIABLE_DESCRIPTION),
    (1181, "Production time"),
    (1182, UNKNOWN_VARIABLE_DESCRIPTION),
    (1183, UNKNOWN_VARIABLE_DESCRIPTION),
    (1184, UNKNOWN_VARIABLE_DESCRIPTION),
    (1185, UNKNOWN_VARIABLE_DESCRIPTION),
    (1187, "LCD resolution for power and current"),
    (1188, "dCon status"),
    (1189, "Config code OOO"),
    (1190, "P14 maximum"),
    (1191, "P14 minimum"),
    (1192, "LegalLoggerSize"),
    (1193, "LegalLoggerDepth"),
    (1194, "AnalysisLoggerDepth"),
    (1195, "AnalysisLoggerInterval"),
    (1196, "P14maximumClock"),
    (1197, "P14maximumDate"),
    (1198, "P14maximumRTC"),
    (1199, "P14minimumClock"),
    (1200, "P14minimumDate"),
    (1201, "P14minimumRTC"),
    (1202, UNKNOWN_VARIABLE_DESCRIPTION),
    (1203, UNKNOWN_VARIABLE_DESCRIPTION),
    (1204, UNKNOWN_VARIABLE_DESCRIPTION),
    (1205, UNKNOWN_VARIABLE_DESCRIPTION),
    (1206, UNKNOWN_VARIABLE_DESCRIPTION),
    (1207, UNKNOWN_VARIABLE_DESCRIPTION),
    (1208, UNKNOWN_VARIABLE_DESCRIPTION),
    (1209, UNKNOWN_VARIABLE_DESCRIPTION),
    (1210, "LoadProfileRegisterSetup"),
    (1211, "LoadProfileLoggerSetup"),
    (1212, "VQLogUlow"),
    (1213, "VQLogUhigh"),
    (1214, "VQLogTeventMinDuration"),
    (1215, "Average Voltage L1"),
    (1216, "Average Voltage L2"),
    (1217, "Average Voltage L3"),
    (1218, "Average Current L1"),
    (1219, "Average Current L2"),
    (1220, "Average Current L3"),
    (1221, "Software lock"),
    (1222, "LoadProfileEventStatus"),
    (1223, UNKNOWN_VARIABLE_DESCRIPTION),
    (1224, "LoggerStatus2"),
    (1225, "RFsupply"),
    (1226, "Load1Active"),
    (1227, "Load1Mode"),
    (1228, "Load1ConvertTariffToPos"),
    (1229, "Load2Active"),
    (1230, "Load2Mode"),
    (1231, "Load2ConvertTariffToPos"),
    (1232, "LoadVariableDelay"),
    (1233, "WorkingdaysSetup"),
    (1234, "PulseInputLevel"),
    (1235, "EventStatusA"),
    (1236, "EventMaskA"),
    (1237, "EventStatusB"),
    (1238, "EventMaskB_PosEdge"),
    (1239, "EventMaskB_NegEdge"),
    (1240, "DayLightSavingConfig"),
    (1241, "DataQualityMask"),
    (1242, "NeutralFaultLogEvent"),
    (1243, "Module identity"),
    (1244, "Load1VariableDelayCnt"),
    (1245, "Load2VariableDelayCnt"),
    (1246, "NeutralFault V_Neutral threshold"),
    (1247, "NeutralFault V_Line threshold"),
    (1248, "NeutralFault Time threshold"),
    (1249, "Neutral Voltage"),
    (1250, "DisplayTest"),
    (1251, "DisplayUserForcedCall"),
    (1252, "DisplayDisconnect"),
    (1253, "DisplayDebitationLogger"),
    (1254, "DisplayLoadProfileLogger"),
    (1255, UNKNOWN_VARIABLE_DESCRIPTION),
    (1256, UNKNOWN_VARIABLE_DESCRIPTION),
    (1257, UNKNOWN_VARIABLE_DESCRIPTION),
    (1258, UNKNOWN_VARIABLE_DESCRIPTION),
    (1259, UNKNOWN_VARIABLE_DESCRIPTION),
    (1260, UNKNOWN_VARIABLE_DESCRIPTION),
    (1261, "Accumulated active energy A14 Day"),
    (1262, "Accumulated active energy A14 Week"),
    (1263, "Accumulated active energy A14 Month"),
    (1264, "Accumulated active energy A14 Year"),
    (1265, "Manual readout checksum"),
    (1266, UNKNOWN_VARIABLE_DESCRIPTION),
    (1267, UNKNOWN_VARIABLE_DESCRIPTION),
    (1268, UNKNOWN_VARIABLE_DESCRIPTION),
    (1269, UNKNOWN_VARIABLE_DESCRIPTION),
    (1270, UNKNOWN_VARIABLE_DESCRIPTION),
    (1271, "KMP communication address"),
    (1272, "DLMS address"),
    (1536, "NeutralVoltageAvgL1"),
    (1537, "NeutralVoltageAvgL2"),
    (1538, "NeutralVoltageAvgL3"),
    (2010, "Active tariff"),
    (2011, "Tariff mode"),
    (2018, UNKNOWN_VARIABLE_DESCRIPTION),
)


class VariableRegistry:
    """Named, read-only table of variable entries."""

    name: str
    entries: tuple[VariableEntry, ...]

    def __init__(self, name: str, entries: Iterable[VariableEntry]) -> None:
        self.name = name
        self.entries = tuple(entries)

    def name_of(self, variable_id: int) -> str:
        """Return the description of a variable id ("Undefined" if absent)."""
        name = UNDEFINED_DESCRIPTION
        for entry in self.entries:
            if entry.id == variable_id:
                name = entry.description
        return name

    def id_of_partial(self, partial_name: str) -> int | None:
        """Return the id of the last entry whose description contains partial_name.

        The match is case sensitive. Returns None when nothing matches.
        """
        variable_id = None
        for entry in self.entries:
            if partial_name in entry.description:
                variable_id = entry.id
        return variable_id

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[VariableEntry]:
        return iter(self.entries)

    def __contains__(self, variable_id: object) -> bool:
        return any(entry.id == variable_id for entry in self.entries)

    def __repr__(self) -> str:
        return f"VariableRegistry({self.name!r}, {len(self.entries)} entries)"


DEFAULT_REGISTRY = VariableRegistry(
    "full",
    (VariableEntry(variable_id, description) for variable_id, description in _VARIABLE_DEFINITIONS),
)

RESPONDING_REGISTRY = VariableRegistry(
    "responding",
    (entry for entry in DEFAULT_REGISTRY if entry.id not in UNRESPONSIVE_VARIABLES),
)

REGISTRIES: dict[str, VariableRegistry] = {
    DEFAULT_REGISTRY.name: DEFAULT_REGISTRY,
    RESPONDING_REGISTRY.name: RESPONDING_REGISTRY,
}


def get_registry(name: str) -> VariableRegistry:
    """Select a registry by name ("full" or "responding").

    Raises:
        ValueError: If no registry has that name
    """
    try:
        return REGISTRIES[name]
    except KeyError:
        raise ValueError(f"Unknown registry '{name}' (expected one of: {', '.join(REGISTRIES)})") from None
