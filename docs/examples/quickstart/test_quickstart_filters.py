__all__ = ("test_quickstart_filters",)


def test_quickstart_filters() -> None:
    # start-example
    from urllib.parse import urlsplit

    from dqkit import Filter, build_cache_key, dynamic_filters, get_pagination_query, get_route_key, select
    from dqkit.params import parse_query_string

    catalog = [
        Filter(name="country", operator="=", db_field="hotels.country"),
        Filter(name="stars", operator="IN", db_field="hotels.stars"),
        Filter(name="name", operator="LIKE", db_field="hotels.name"),
        Filter(name="rooms", operator=">=", db_field="SUM(rooms.capacity)"),
    ]
    base_query = (
        select("hotels.id", "hotels.name")
        .from_("hotels")
        .join("rooms", on="rooms.hotel_id = hotels.id")
        .group_by("hotels.id", "hotels.name")
    )

    url = "/hotels?country=Greece&stars=4&stars=5&name=sea&rooms=20&limit=10"
    params = parse_query_string(urlsplit(url).query)

    query, params_applied = dynamic_filters(catalog, base_query, params)
    sql, args = query.to_sql()
    count_sql, count_args = get_pagination_query(query).to_sql()

    route_key, _ = get_route_key("hotels")
    cache_key = build_cache_key(route_key, params_applied)
    print(f"{sql}\n{args}\n{count_sql}\n{cache_key}")
    # end-example

    assert sql == (
        "SELECT hotels.id, hotels.name FROM hotels JOIN rooms ON rooms.hotel_id = hotels.id "
        "WHERE hotels.country = ? AND hotels.stars IN (?, ?) AND hotels.name LIKE ? "
        "GROUP BY hotels.id, hotels.name HAVING SUM(rooms.capacity) >= ? LIMIT ?"
    )
    assert args == ["Greece", "4", "5", "%sea%", "20", "10"]
    assert count_sql.startswith("SELECT COUNT(*) AS total_rows FROM (")
    assert count_args == ["Greece", "4", "5", "%sea%", "20"]
    assert cache_key == (
        'hotels:{"SUM(rooms.capacity) >=":"20","hotels.country =":"Greece",'
        '"hotels.name LIKE":"%sea%","hotels.stars IN":"4,5","limit":"10"}'
    )
