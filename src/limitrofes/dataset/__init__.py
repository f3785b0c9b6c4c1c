"""Adjacency dataset: parsing, indexing and neighbor queries.

Raw CSV text goes through `parse.parse_csv`, the resulting records are turned
into an immutable `build.Dataset`, and `query` answers "which municipalities
border X" for a selected name. Everything here is synchronous and pure; the
fetch of the text lives in `limitrofes.source`.
"""
