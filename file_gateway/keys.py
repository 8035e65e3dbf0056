import re
import time
from dataclasses import dataclass

from file_gateway.errors import ValidationError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass(frozen=True)
class Identity:
    id: str
    email: str


@dataclass(frozen=True)
class ParsedKey:
    key: str
    partition: str
    file_id: str
    file_name: str


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


def build_file_id(file_name: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}_{sanitize_filename(file_name)}"


def build_key(partition: str, file_id: str) -> str:
    return f"{partition}/{file_id}"


def display_name(file_id: str) -> str:
    # Only the first timestamp segment is stripped; underscores in the name survive.
    _, sep, rest = file_id.partition("_")
    return rest if sep else file_id


def parse_key(key: str) -> ParsedKey:
    partition, _, file_id = key.rpartition("/")
    return ParsedKey(key=key, partition=partition, file_id=file_id, file_name=display_name(file_id))


class RegionPartitioner:
    name = "region"
    all_regions = "all"

    def __init__(self, regions: list[str]):
        self.regions = list(regions)

    def _invalid_region(self, allow_all: bool) -> ValidationError:
        choices = list(self.regions) + ([self.all_regions] if allow_all else [])
        if len(choices) > 2:
            listed = ", ".join(choices[:-1]) + ", or " + choices[-1]
        else:
            listed = " or ".join(choices)
        return ValidationError(f"Invalid region. Must be {listed}")

    def partition_for(self, identity: Identity, region: str | None) -> str:
        if not region or region not in self.regions:
            raise self._invalid_region(allow_all=False)
        return region

    def list_prefixes(self, identity: Identity, region: str | None) -> list[str]:
        selected = region or self.all_regions
        if selected == self.all_regions:
            return [f"{code}/" for code in self.regions]
        if selected not in self.regions:
            raise self._invalid_region(allow_all=True)
        return [f"{selected}/"]

    def describe(self, partition: str) -> dict:
        return {"region": partition}


class UserPartitioner:
    name = "user"

    def partition_for(self, identity: Identity, region: str | None = None) -> str:
        return f"users/{identity.id}"

    def list_prefixes(self, identity: Identity, region: str | None = None) -> list[str]:
        return [f"{self.partition_for(identity)}/"]

    def describe(self, partition: str) -> dict:
        return {"owner_id": partition.removeprefix("users/")}


def build_partitioner(strategy: str, regions: list[str]):
    if strategy == RegionPartitioner.name:
        return RegionPartitioner(regions)
    if strategy == UserPartitioner.name:
        return UserPartitioner()
    raise ValueError(f"unknown partition strategy: {strategy}")
