import pytest

from cjdnsadmin.admin.dummy_peer import sample_routing_table
from cjdnsadmin.admin.exceptions import ProtocolError
from cjdnsadmin.routing.host import Host
from cjdnsadmin.routing.table import RoutingTable, normalize_address

SELF = "fc5d:baa5:61fc:6ffd:9554:67f0:e290:7535"
PEER_A = "fc2b:8b85:7bd4:2a28:1ec5:3b4c:ffd5:4a17"
PEER_B = "fcf1:a7a8:8ec0:589b:c64c:cff1:1e41:1a9e"
FAR = "fc38:4c2c:1a8f:3981:f2e7:c2b9:6870:6e84"
DEAD = "fcd4:3a5b:4b0e:9e3a:b5b8:3b5a:4a29:3e11"


def paths(chain):
    return [route.path for route in chain]


@pytest.fixture
def table(session):
    return RoutingTable.build(session)


def test_build_keeps_dump_order(table):
    assert len(table) == 6
    assert [r.index for r in table.routes] == list(range(6))
    assert [r.address for r in table.routes] == [row["ip"] for row in sample_routing_table()]


def test_hosts_are_live_and_distinct(table):
    assert [h.address for h in table.hosts] == [SELF, PEER_A, PEER_B, FAR]
    assert all(isinstance(h, Host) for h in table.hosts)


def test_dead_route_stays_in_route_list(table):
    dead = table.routes[5]
    assert dead.address == DEAD
    assert not dead.is_alive
    assert paths(dead.get_hops()) == ["1", "10011", "101010011"]


def test_get_routes(table):
    routes = table.get_routes()

    assert list(routes) == [SELF, PEER_A, PEER_B, FAR]
    assert [paths(c) for c in routes[SELF]] == [["1"]]
    assert [paths(c) for c in routes[PEER_A]] == [["1", "10011"]]
    assert [paths(c) for c in routes[FAR]] == [
        ["1", "10011", "101010011"],
        ["1", "10101", "101010101"],
    ]


def test_get_routes_for_one_host_any_notation(table):
    routes = table.get_routes(FAR.upper())
    assert list(routes) == [FAR]
    assert len(routes[FAR]) == 2


def test_get_routes_for_dead_host_is_empty(table):
    assert table.get_routes(DEAD) == {}


def test_get_routes_rejects_bad_address(table):
    with pytest.raises(ValueError):
        table.get_routes("not-an-address")


def test_get_routes_max_hops(table):
    assert list(table.get_routes(max_hops=1)) == [SELF, PEER_A, PEER_B]
    assert table.get_routes(max_hops=0) == {SELF: [(table.routes[0],)]}


def test_get_hosts(table):
    assert [h.address for h in table.get_hosts()] == [SELF, PEER_A, PEER_B, FAR, DEAD]
    assert [h.address for h in table.get_hosts(max_hops=1)] == [SELF, PEER_A, PEER_B]
    assert len(table.get_hosts(max_hops=9999)) == 5


def test_route_get_hops_matches_table(table):
    for route in table.routes:
        assert route.get_hops() == table.get_hops(route)


def test_identical_dumps_give_identical_results():
    one = RoutingTable.from_dump(sample_routing_table())
    two = RoutingTable.from_dump(sample_routing_table())

    assert one.routes == two.routes
    assert one.hosts == two.hosts
    assert one.get_routes() == two.get_routes()


def test_build_aborts_on_page_error(router, session):
    router.routing_table = sample_routing_table()
    real_run = router._run

    def failing_run(method, args):
        if method == "NodeStore_dumpTable" and args.get("page") == 1:
            return {"error": "out of memory"}
        return real_run(method, args)

    router._run = failing_run

    with pytest.raises(ProtocolError, match="out of memory"):
        RoutingTable.build(session)


def test_build_with_page_limit(session):
    with pytest.raises(ProtocolError, match="pages"):
        RoutingTable.build(session, max_pages=2)


def test_normalize_address():
    assert normalize_address("fc00::1") == "fc00:0000:0000:0000:0000:0000:0000:0001"


def test_get_routes_for_host_skips_unparsable_rows():
    table = RoutingTable.from_dump([
        {"ip": "bogus", "path": "0000.0000.0000.0013", "link": 5},
        {"ip": FAR, "path": "0000.0000.0000.0015", "link": 5},
    ])

    assert list(table.get_routes(FAR)) == [FAR]
    assert list(table.get_routes()) == ["bogus", FAR]
