"""Input table readers.

Each subdirectory is one data product with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── models.py         # Column-name constants and required-column sets
    └── tables.py         # CSV readers that validate required columns

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above.
   See ``neon/`` for an example.

2. Write readers that return DataFrames and check their schema::

       def read_something(path: Path) -> pd.DataFrame:
           df = pd.read_csv(path, dtype=str)
           require_columns(df, REQUIRED_COLUMNS, "something")
           return df

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Wire into the pipeline (see ``flows/analyze.py``):
   - Add a ``@task`` that calls your reader
   - Pass its result to the analysis
   - Write derived outputs with ``store.write`` or ``store.write_table``

5. Add tests in ``tests/test_{name}.py``.
"""
