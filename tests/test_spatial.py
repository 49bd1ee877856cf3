from sqlalchemy.ext.asyncio import create_async_engine

from brewery_directory.config import Settings
from brewery_directory.database import Base
from brewery_directory.spatial import create_spatial_functions, nearby_function_ddl, nearby_functions


def _settings():
    return Settings(database_url="sqlite+aiosqlite://")


def test_attraction_function_signature_and_filter():
    ddl = nearby_functions(_settings())[0]
    assert ddl.startswith("CREATE OR REPLACE FUNCTION get_nearby_attractions(")
    assert "attraction_type TEXT DEFAULT NULL" in ddl
    assert "(attraction_type IS NULL OR t.type = attraction_type)" in ddl
    assert "FROM attractions t" in ddl
    assert "ST_DWithin(" in ddl and "radius_meters)" in ddl
    assert "distance_meters DOUBLE PRECISION" in ddl
    assert ddl.rstrip().endswith("ORDER BY distance_meters\n$$")


def test_function_returns_every_table_column():
    table = Base.metadata.tables["attractions"]
    ddl = nearby_function_ddl(table, "nearby_fn")
    for column in table.columns:
        assert f"t.{column.name}" in ddl or f't."{column.name}"' in ddl
    assert "place_id TEXT" in ddl
    assert "hours JSON" in ddl
    assert "created_at TIMESTAMP WITH TIME ZONE" in ddl


def test_brewery_function_has_no_type_argument():
    ddl = nearby_functions(_settings())[1]
    assert ddl.startswith("CREATE OR REPLACE FUNCTION get_nearby_breweries(")
    assert "attraction_type" not in ddl
    assert "FROM breweries t" in ddl


def test_function_names_follow_settings():
    settings = Settings(database_url="sqlite+aiosqlite://", nearby_rpc_name="nearby_places")
    assert nearby_functions(settings)[0].startswith("CREATE OR REPLACE FUNCTION nearby_places(")


async def test_skipped_on_sqlite():
    engine = create_async_engine("sqlite+aiosqlite://")
    try:
        assert await create_spatial_functions(engine, _settings()) is False
    finally:
        await engine.dispose()
