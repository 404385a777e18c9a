import matplotlib

matplotlib.use("Agg")

import pandas as pd  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture
def nations_df():
    rows = [
        # country, region, year, gdp_percap, life_expect, population
        ("Aland", "Europe", 2015, 30000.0, 80.1, 5.0e6),
        ("Aland", "Europe", 2016, 31000.0, 80.4, 5.1e6),
        ("Aland", "Europe", 2017, 32000.0, 80.6, 5.2e6),
        ("Borduria", "Asia", 2015, 2000.0, 65.0, 9.0e7),
        ("Borduria", "Asia", 2016, 2200.0, 65.8, 9.2e7),
        ("Borduria", "Asia", 2017, 2500.0, 66.3, 9.4e7),
        ("Cascadia", "Americas", 2016, 15000.0, 74.0, 3.0e7),
        ("Cascadia", "Americas", 2017, 15500.0, 74.5, 3.1e7),
    ]
    df = pd.DataFrame(rows, columns=["country", "region", "year", "gdp_percap", "life_expect", "population"])
    df["year"] = df["year"].astype("Int64")
    df["country"] = df["country"].astype("string")
    df["region"] = df["region"].astype("string")
    return df


@pytest.fixture
def warming_df():
    df = pd.DataFrame(
        {
            "year": [2000, 2001, 2002, 2003, 2004],
            "value": [0.39, 0.54, 0.63, 0.62, 0.54],
        }
    )
    df["year"] = df["year"].astype("Int64")
    return df


@pytest.fixture
def simulations_df():
    years = [2000, 2001, 2002, 2003]
    df = pd.DataFrame(
        {
            "year": years + years,
            "value": [0.0, 0.1, 0.0, -0.1, 0.2, 0.4, 0.6, 0.8],
            "type": ["natural"] * 4 + ["human"] * 4,
        }
    )
    df["year"] = df["year"].astype("Int64")
    df["type"] = df["type"].astype("string")
    return df


@pytest.fixture
def data_dir(tmp_path, nations_df, warming_df, simulations_df):
    """Directory holding the three input CSVs."""
    root = tmp_path / "data"
    root.mkdir()
    nations_df.to_csv(root / "nations.csv", index=False)
    warming_df.to_csv(root / "warming.csv", index=False)
    simulations_df.to_csv(root / "simulations.csv", index=False)
    return root


class _Body:
    def __init__(self, content: bytes) -> None:
        self._content = content

    def read(self) -> bytes:
        return self._content


class _Paginator:
    def __init__(self, objects) -> None:
        self._objects = objects

    def paginate(self, Bucket, Prefix):
        keys = sorted(k for (b, k) in self._objects if b == Bucket and k.startswith(Prefix))
        # two pages to exercise the pagination loop
        half = len(keys) // 2
        yield {"Contents": [{"Key": k} for k in keys[:half]]}
        yield {"Contents": [{"Key": k} for k in keys[half:]]}


class FakeS3Client:
    """In-memory stand-in for the subset of the boto3 S3 client we use."""

    def __init__(self) -> None:
        self.objects = {}
        self.content_types = {}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        if isinstance(Body, str):
            Body = Body.encode("utf-8")
        self.objects[(Bucket, Key)] = bytes(Body)
        self.content_types[(Bucket, Key)] = ContentType

    def get_object(self, Bucket, Key):
        return {"Body": _Body(self.objects[(Bucket, Key)])}

    def get_paginator(self, name):
        assert name == "list_objects_v2"
        return _Paginator(self.objects)


@pytest.fixture
def fake_s3():
    return FakeS3Client()


