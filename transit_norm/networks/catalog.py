"""
Built-in network catalog.

Each network is described as plain data and validated into a NetworkConfig
when the catalog is loaded. Style keys are the product code followed by the
label ("B12", "SS1"). A JSON file given by NETWORK_CATALOG_PATH can add
networks or replace built-in ones with the same id.
"""

import enum
from pathlib import Path
from typing import Any

import structlog
from pydantic import TypeAdapter

from transit_norm.schemas.network_config import NetworkConfig

logger = structlog.get_logger(__name__)


class NetworkId(str, enum.Enum):
    """Identifiers of the built-in networks."""

    AVV_AACHEN = "avv_aachen"
    AVV_AUGSBURG = "avv_augsburg"
    BVG = "bvg"
    DB = "db"
    MVV = "mvv"
    SF = "sf"
    TFL = "tfl"
    VAO = "vao"
    VRS = "vrs"


# ==================== Shared Building Blocks ====================

# EFA "mot" index: 0 train, 1 S-Bahn, 2 U-Bahn, 3/4 tram, 5/6/7/10 bus,
# 8 cable car, 9 ferry, 11 other (filtered)
EFA_PRODUCTS = "RSUTTBBBCFB?"

# EFA lines without a mot are classified by their train name
EFA_RULES: list[dict[str, Any]] = [
    {"tag": "efa-rail-replacement", "when": {"long_name": "Schienenersatzverkehr"}, "product": "B", "label": "SEV"},
    {"tag": "efa-sbahn", "when": {"category_name": "S-Bahn"}, "product": "S"},
    {"tag": "efa-ubahn", "when": {"category_name": "U-Bahn"}, "product": "U"},
    {"tag": "efa-tram", "when": {"category_name": "Straßenbahn"}, "product": "T"},
    {"tag": "efa-badner-bahn", "when": {"category_name": "Badner Bahn"}, "product": "T"},
    {
        "tag": "efa-bus",
        "when_pattern": {
            "category_name": (
                r"Stadtbus|Citybus|Regionalbus|ÖBB-Postbus|Autobus|Discobus|Nachtbus"
                r"|Anrufsammeltaxi|Ersatzverkehr|Vienna Airport Lines"
            )
        },
        "product": "B",
    },
]

WHITE = "#FFFFFF"
BLACK = "#000000"


def _styles(background: str, *labels: str, foreground: str = WHITE, **extra: Any) -> dict[str, dict[str, Any]]:
    return {label: {"background": background, "foreground": foreground, **extra} for label in labels}


# ==================== Networks ====================

AVV_AACHEN: dict[str, Any] = {
    "network_id": NetworkId.AVV_AACHEN.value,
    "products": "RIIBSUTBBPF",
    "category_rules": [
        # "ALT74ALT" -> "74ALT"
        {
            "tag": "alt-on-demand",
            "mode": 9,
            "when_pattern": {"symbol": r"ALT(?P<rest>.+)"},
            "product": "P",
            "label": "{rest}",
        },
    ],
    "name_split": {"places": {"AC": "Aachen"}, "template": "first_comma"},
    "styles": {
        "BSEV": {"background": "#ED028C", "background2": "#888888", "foreground": WHITE},
        **_styles("#CF9C46", "B3", "B3A", "B3B", "B13", "B13A", "B13B"),
        **_styles("#FF0000", "B4", "B16"),
        **_styles("#ED028C", "B1", "B11", "B21", "B41", "B51"),
        **_styles("#F499C2", "B33", "B34", "B54", "B73"),
        **_styles("#6F92AE", "B5", "B45"),
        **_styles("#00AEEF", "B15", "B25", "B35", "B43", "B55", "B65"),
        **_styles("#6BCFF6", "B63", "B66"),
        **_styles("#802990", "B7", "B17", "B27", "B37", "B47", "B74"),
        **_styles("#B96730", "B14", "B24"),
        **_styles("#F7931D", "BAL1"),
        **_styles("#9FD05F", "B31", "B36"),
        **_styles("#00B59D", "B53"),
        **_styles("#00A54F", "B50", "B70", "B80"),
        **_styles("#FFFF00", "B2", "B12", "B22", "B23"),
        # Express buses
        **_styles("#CF9C46", "B103", border="#444444"),
        **_styles("#00AEEF", "B125", "B135", border="#444444"),
        **_styles("#802990", "B147", border="#444444"),
        **_styles("#ED028C", "B151", "B220", "BSB20", border="#444444"),
        **_styles("#F499C2", "B173", border="#444444"),
        **_styles("#6BCFF6", "BSB63", "BSB66", border="#444444"),
    },
}

AVV_AUGSBURG: dict[str, Any] = {
    "network_id": NetworkId.AVV_AUGSBURG.value,
    "products": "IIRRSBFUTP",
    # Feeds also write the place as "Augsburg (Bayern)". A second literal would
    # overlap "Augsburg", so the qualifier is a separator and the place stays
    # "Augsburg". Trailing ", Augsburg (Bayern)" is left unsplit.
    "name_split": {
        "places": ["Augsburg"],
        "prefix_separators": [" (Bayern) ", " (Bayern)-", " ", "-"],
        "suffix_separators": [", "],
    },
    "poi_split": {"places": ["Augsburg"], "prefix_separators": [" (Bayern), ", ", "], "suffix_separators": []},
    "address_split": {"places": ["Augsburg"], "prefix_separators": [" (Bayern), ", ", "], "suffix_separators": []},
}

BVG: dict[str, Any] = {
    "network_id": NetworkId.BVG.value,
    "products": "SUTBFIRP",
    "name_split": {
        "template": "parentheses",
        "place_first": False,
        "fallback_template": "one_comma",
        "fallback_place_first": True,
    },
    "styles": {
        **_styles("#DD4DAE", "SS1"),
        **_styles("#108449", "SS2", "SS25"),
        **_styles("#166AB8", "SS3"),
        **_styles("#A23F30", "SS41"),
        **_styles("#BF5A2A", "SS42"),
        **_styles("#BF8037", "SS46", "SS47"),
        **_styles("#F36717", "SS5"),
        **_styles("#7760B0", "SS7", "SS75"),
        **_styles("#55B831", "SS8"),
        **_styles("#942440", "SS9"),
        **_styles("#54832F", "UU1", shape="rect"),
        **_styles("#D71910", "UU2", shape="rect"),
        **_styles("#2F989A", "UU3", shape="rect"),
        **_styles("#FFE92A", "UU4", shape="rect", foreground=BLACK),
        **_styles("#5B1F10", "UU5", shape="rect"),
        "BN": {"shape": "rect", "background": "#993399", "foreground": WHITE},
    },
}

DB: dict[str, Any] = {
    "network_id": NetworkId.DB.value,
    "products": "IIIRSBFUTP",
    "name_split": {"template": "one_comma", "place_first": False},
    "poi_split": {"template": "first_comma"},
    "address_split": {"template": "first_comma"},
}

MVV: dict[str, Any] = {
    "network_id": NetworkId.MVV.value,
    "products": EFA_PRODUCTS,
    "category_rules": [
        {
            "tag": "hkx",
            "mode": 0,
            "when": {"long_name": "Hamburg-Köln-Express"},
            "product": "I",
            "label": "{long_name}",
        },
        *(
            {"tag": f"regional-{index}", "mode": 0, "when": {"long_name": name}, "product": "R", "label": "{long_name}"}
            for index, name in enumerate(
                (
                    "Erfurter Bahn Express",
                    "VIAS GmbH",
                    "Vogtlandbahn",
                    "Süd-Thüringen-Bahn",
                    "erixx - Der Heidesprinter",
                )
            )
        ),
        *EFA_RULES,
    ],
    "name_split": {"places": ["München"], "template": "first_comma"},
    "styles": {
        **_styles("#00CCFF", "SS1"),
        **_styles("#66CC00", "SS2"),
        **_styles("#880099", "SS3"),
        **_styles("#FF0033", "SS4"),
        **_styles("#00AA66", "SS6"),
        **_styles("#993333", "SS7"),
        **_styles(BLACK, "SS8", foreground="#FFCC00"),
        **_styles(BLACK, "SS20", foreground="#FFAAAA"),
        **_styles("#FFAAAA", "SS27"),
        **_styles("#231F20", "SA"),
        **_styles("#883388", "T12"),
        **_styles("#3366CC", "T15"),
    },
}

SF: dict[str, Any] = {
    "network_id": NetworkId.SF.value,
    "products": EFA_PRODUCTS,
    "category_rules": [
        # Direction placeholders published as line names
        {"tag": "direction-placeholder", "when_pattern": {"symbol": r"(?:NORTH|SOUTH|EAST|WEST)BOUND"}, "product": "?"},
        *EFA_RULES,
    ],
    "name_split": {"template": "last_comma", "place_first": False},
    "styles": {
        **_styles("#00AEEF", "RDaly City / Dublin Pleasanton", "RDublin Pleasanton / Daly City"),
        **_styles("#FFE800", "RSFO / Pittsburg Bay Point", "RPittsburg Bay Point / SFO", foreground=BLACK),
        **_styles("#4EBF49", "RDaly City / Fremont", "RFremont / Daly City"),
        **_styles("#FAA61A", "RFremont / Richmond", "RRichmond / Fremont"),
        **_styles("#F81A23", "RMillbrae / Richmond", "RRichmond / Millbrae"),
    },
}

TFL: dict[str, Any] = {
    "network_id": NetworkId.TFL.value,
    "products": EFA_PRODUCTS,
    "category_rules": [
        {"tag": "hull-trains", "mode": 0, "when": {"category_name": "First Hull Trains"}, "product": "I"},
        {
            "tag": "national-rail",
            "mode": 0,
            "when_pattern": {
                "category_name": (
                    r"Southern|Southeastern|South West Trains|Greater Anglia|First Great Western"
                    r"|First Capital Connect|Northern Rail|Chiltern Railways|Heathrow Connect|Heathrow Express"
                    r"|Gatwick Express|Merseyrail|East Coast|Cross Country|East Midlands Trains"
                    r"|Arriva Trains Wales|First TransPennine Express|ScotRail|London Midland|c2c"
                    r"|Grand Central|Virgin Trains|Island Line"
                    r"|=(?:SN|SE|SW|LE|GW|FC|NT|HX|ME|GR|EM|AW|TP|SR|LM|CC|VT|CH)"
                )
            },
            "product": "R",
        },
        {"tag": "overground", "mode": 0, "when": {"category_name": "London Overground"}, "product": "S"},
        {
            "tag": "elizabeth-line",
            "mode": 0,
            "when": {"category_name": "Elizabeth line"},
            "product": "S",
            "label": "Elizabeth",
        },
        *EFA_RULES,
    ],
    "name_split": {
        "places": ["London"],
        "prefix_separators": [", "],
        "template": "last_comma",
        "place_first": False,
    },
}

VAO: dict[str, Any] = {
    "network_id": NetworkId.VAO.value,
    "products": "ISU?TRBBTFPBR???",
    "name_split": {"template": "one_comma", "place_first": False, "min_place_length": 3, "max_place_length": 64},
    "address_split": {"template": "first_comma"},
}

VRS: dict[str, Any] = {
    "network_id": NetworkId.VRS.value,
    "products": "IRSUTBFP",
    "category_rules": [
        # "AST 12", "VRM 5", "TaxiBus 7" -> "12", "5", "7"
        {
            "tag": "prefixed-bus-number",
            "when": {"category_name": "Bus"},
            "when_pattern": {"symbol": r"(?:AST|VRM|VRR|TaxiBus) (?P<number>.+)"},
            "product": "B",
            "label": "{number}",
        },
        {"tag": "long-distance", "when": {"category_name": "LongDistanceTrains"}, "product": "I"},
        {"tag": "regional", "when": {"category_name": "RegionalTrains"}, "product": "R"},
        {"tag": "suburban", "when": {"category_name": "SuburbanTrains"}, "product": "S"},
        {"tag": "underground", "when": {"category_name": "Underground"}, "product": "U"},
        {
            "tag": "light-rail-subway",
            "when": {"category_name": "LightRail"},
            "when_pattern": {"symbol": r"U.*"},
            "product": "U",
        },
        {"tag": "light-rail", "when": {"category_name": "LightRail"}, "product": "T"},
        {"tag": "bus", "when_pattern": {"category_name": r"Bus|CommunityBus|RailReplacementServices"}, "product": "B"},
        {"tag": "boat", "when": {"category_name": "Boat"}, "product": "F"},
        {"tag": "on-demand", "when": {"category_name": "OnDemandServices"}, "product": "P"},
    ],
    "name_split": {"places": ["Köln", "Bonn"], "template": "first_comma"},
    "styles": {
        **_styles("#00919D", "BSB"),
        **_styles("#ED1C24", "T1"),
        **_styles("#F680C5", "T3", "T67"),
        **_styles("#F24DAE", "T4"),
        **_styles("#9C8DCE", "T5"),
        **_styles("#F57947", "T7"),
        **_styles("#F5777B", "T9"),
        **_styles("#80CC28", "T12", "T61"),
        **_styles("#9E7B65", "T13"),
        **_styles("#4DBD38", "T15", "T62"),
        **_styles("#33BAAB", "T16"),
        **_styles("#05A1E6", "T18"),
        **_styles("#73D2F6", "T63"),
        **_styles("#B3DB18", "T65"),
        **_styles("#EC008C", "T66"),
        **_styles("#CA93D0", "T68"),
        **_styles("#0065AE", "B16", "B18", "B63", "B66", "B67", "B68"),
        **_styles("#E4000B", "B61", "B62", "B65"),
        **_styles("#2E2383", "B163", "B529", "B537", "B541", "B550", "B551"),
        "BN": {"background": BLACK, "foreground": WHITE},
    },
    # "SB60" and other express buses share one style
    "style_prefixes": ["BSB"],
}

BUILTIN_NETWORKS: dict[str, dict[str, Any]] = {
    config["network_id"]: config for config in (AVV_AACHEN, AVV_AUGSBURG, BVG, DB, MVV, SF, TFL, VAO, VRS)
}

_CATALOG_FILE_ADAPTER = TypeAdapter(list[NetworkConfig])


def load_catalog_file(path: str | Path) -> dict[str, NetworkConfig]:
    """
    Load network configurations from a JSON file.

    The file holds a JSON array of network configuration objects.

    Args:
        path: Path to the JSON file

    Returns:
        Mapping of network id to validated configuration

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If any entry is invalid
        ValueError: If the file defines a network id twice
    """
    configs = _CATALOG_FILE_ADAPTER.validate_json(Path(path).read_bytes())
    catalog: dict[str, NetworkConfig] = {}
    for config in configs:
        if config.network_id in catalog:
            msg = f"Network '{config.network_id}' is defined more than once in {path}"
            raise ValueError(msg)
        catalog[config.network_id] = config
    logger.info("network_catalog_file_loaded", path=str(path), network_count=len(catalog))
    return catalog


def load_catalog(path: str | Path | None = None) -> dict[str, NetworkConfig]:
    """
    Build the full network catalog.

    Args:
        path: Optional JSON catalog file; its entries replace built-ins with the same id

    Returns:
        Mapping of network id to validated configuration, sorted by id
    """
    catalog = {network_id: NetworkConfig.model_validate(data) for network_id, data in BUILTIN_NETWORKS.items()}
    if path is not None:
        overrides = load_catalog_file(path)
        if replaced := sorted(set(overrides) & set(catalog)):
            logger.info("network_catalog_overrides_builtin", networks=replaced)
        catalog.update(overrides)
    return dict(sorted(catalog.items()))
