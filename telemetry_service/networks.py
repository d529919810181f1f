"""Network identity and resolution of the target network for a report."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Mainnet:
    def __str__(self) -> str:
        return "mainnet"


@dataclass(frozen=True)
class Testnet:
    def __str__(self) -> str:
        return "testnet"


@dataclass(frozen=True)
class Other:
    """Any network without a backing store. Reports for it are discarded."""
    name: str

    def __str__(self) -> str:
        return self.name


NetworkId = Mainnet | Testnet | Other

MAINNET = Mainnet()
TESTNET = Testnet()
UNKNOWN = Other("unknown")


def resolve(path_hint: NetworkId | None, embedded: str | None) -> NetworkId:
    """
    Decide which network a report belongs to.

    The chain id embedded in the report wins over the hint taken from the
    request path. An empty embedded id counts as not supplied.
    """
    if embedded:
        match embedded:
            case "mainnet":
                return MAINNET
            case "testnet":
                return TESTNET
            case _:
                return Other(embedded)
    if path_hint is not None:
        return path_hint
    return UNKNOWN


def network_label(network: NetworkId) -> str:
    """Metric label value. Every Other collapses to "other"."""
    match network:
        case Mainnet():
            return "mainnet"
        case Testnet():
            return "testnet"
        case Other():
            return "other"


def store_name(network: NetworkId) -> str | None:
    """Key into the store registry; None for networks without a store."""
    match network:
        case Mainnet():
            return "mainnet"
        case Testnet():
            return "testnet"
        case Other():
            return None


LABELS = ("mainnet", "testnet", "other")
# Every name store_name can return.
STORE_NETWORKS = ("mainnet", "testnet")
