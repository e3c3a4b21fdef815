"""
Tests for source loaders.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from querysketch.exceptions import SourceLoadError
from querysketch.models import SourceLoad
from querysketch.plan.nodes import FileSourceRelation
from querysketch.sampling import sketch
from querysketch.sources import (
    InMemorySourceLoader,
    PolarsSourceLoader,
    resolve_reader_settings,
)


def write_csv(path: Path, n: int, start: int = 0) -> str:
    lines = ["id,city,amount"]
    lines += [f"{i},city{i % 3},{i * 10}" for i in range(start, start + n)]
    path.write_text("\n".join(lines) + "\n")
    return str(path)


class TestResolveReaderSettings:

    def test_descriptor_options_override_relation(self) -> None:
        source = SourceLoad.from_paths("csv", ["a.csv"], options={"sep": ";"}, data_schema={"id": "int"})
        relation = FileSourceRelation(options={"sep": ",", "header": "true"})
        options, schema = resolve_reader_settings(source, relation)
        assert options == {"sep": ";", "header": "true"}
        assert schema == {"id": "int"}

    def test_relation_schema_wins(self) -> None:
        source = SourceLoad.from_paths("csv", ["a.csv"], data_schema={"id": "int"})
        relation = FileSourceRelation(data_schema={"id": "long", "city": "string"})
        _, schema = resolve_reader_settings(source, relation)
        assert schema == {"id": "long", "city": "string"}

    def test_without_relation(self) -> None:
        source = SourceLoad.from_paths("csv", ["a.csv"])
        assert resolve_reader_settings(source, None) == ({}, None)


class TestInMemorySourceLoader:

    def test_partitions_follow_path_order(self) -> None:
        loader = InMemorySourceLoader({
            "b": [[3], [4, 5]],
            "a": [[1, 2]],
        })
        collection = loader.load(SourceLoad.from_paths("parquet", ["a", "b"]))
        assert collection.num_partitions == 3
        assert list(collection.iter_partition(0)) == [1, 2]
        assert list(collection.iter_partition(2)) == [4, 5]

    def test_unknown_path(self) -> None:
        loader = InMemorySourceLoader({"a": [[1]]})
        with pytest.raises(SourceLoadError) as exc_info:
            loader.load(SourceLoad.from_paths("parquet", ["a", "zzz"]))
        assert exc_info.value.source == "zzz"

    def test_each_load_gets_new_collection_id(self) -> None:
        loader = InMemorySourceLoader({"a": [[1]]})
        source = SourceLoad.from_paths("parquet", ["a"])
        assert loader.load(source).id != loader.load(source).id


class TestPolarsSourceLoader:

    def test_one_partition_per_csv_file(self, tmp_path: Path) -> None:
        paths = [
            write_csv(tmp_path / "part-0.csv", 12),
            write_csv(tmp_path / "part-1.csv", 30, start=100),
        ]
        collection = PolarsSourceLoader().load(SourceLoad.from_paths("csv", paths, options={"header": "true"}))

        assert collection.num_partitions == 2
        first = list(collection.iter_partition(0))
        assert len(first) == 12
        assert first[0] == {"id": 0, "city": "city0", "amount": 0}

        result = sketch(collection, 10)
        assert [p.count for p in result.partitions] == [12, 30]
        assert [p.sample_size for p in result.partitions] == [10, 10]

    def test_schema_selects_columns(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "data.csv", 3)
        source = SourceLoad.from_paths("CSV", [path], options={"header": "true"})
        relation = FileSourceRelation(paths=(path,), format="csv", data_schema={"id": "int"})
        collection = PolarsSourceLoader().load(source, relation)
        assert list(collection.iter_partition(0)) == [{"id": 0}, {"id": 1}, {"id": 2}]

    def test_custom_separator(self, tmp_path: Path) -> None:
        path = tmp_path / "semi.csv"
        path.write_text("id;name\n1;a\n2;b\n")
        source = SourceLoad.from_paths("csv", [str(path)], options={"sep": ";", "header": "true"})
        rows = list(PolarsSourceLoader().load(source).iter_partition(0))
        assert rows == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]

    def test_unsupported_format(self) -> None:
        with pytest.raises(SourceLoadError) as exc_info:
            PolarsSourceLoader().load(SourceLoad.from_paths("avro", ["x.avro"]))
        assert exc_info.value.source == "avro"

    def test_nothing_read_before_iteration(self, tmp_path: Path) -> None:
        # Missing files only fail once a worker starts reading
        source = SourceLoad.from_paths("csv", [str(tmp_path / "missing.csv")])
        collection = PolarsSourceLoader().load(source)
        assert collection.num_partitions == 1

    def test_header_off_by_default(self, tmp_path: Path) -> None:
        path = tmp_path / "plain.csv"
        path.write_text("1,a\n2,b\n3,c\n")
        rows = list(PolarsSourceLoader().load(SourceLoad.from_paths("csv", [str(path)])).iter_partition(0))
        assert len(rows) == 3
        assert list(rows[0].values()) == [1, "a"]

    def test_header_row_counted_without_option(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "data.csv", 5)
        rows = list(PolarsSourceLoader().load(SourceLoad.from_paths("csv", [path])).iter_partition(0))
        assert len(rows) == 6

    def test_rows_streamed_across_batches(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "big.csv", 103)
        source = SourceLoad.from_paths("csv", [path], options={"header": "true"})
        collection = PolarsSourceLoader(batch_size=10).load(source)

        ids = [row["id"] for row in collection.iter_partition(0)]
        assert ids == list(range(103))
        assert sketch(collection, 20).partitions[0].count == 103

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(ValueError):
            PolarsSourceLoader(batch_size=0)
