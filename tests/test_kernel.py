from raumserver.lib import kernel as kernel_mod
from raumserver.lib.kernel import Raumkernel
from tests.fakes import FakeGroup, FakeSpeaker


def test_room_lookup_prefers_uid_then_name(household) -> None:
    devices = household.kernel.manager_disposer.device_manager

    assert devices.get_room_renderer("RINCON_DINING") is household.dining
    assert devices.get_room_renderer("dining") is household.dining
    assert devices.get_room_renderer("RINCON_KITCHEN:12") is None
    assert [room.player_name for room in devices.rooms()] == ["Bath", "Dining", "Kitchen"]


def test_zone_lookup(household) -> None:
    zones = household.kernel.manager_disposer.zone_manager

    assert [zone.uid for zone in zones.zones()] == ["RINCON_BATH:3", "RINCON_KITCHEN:12"]
    assert zones.get_virtual_renderer("RINCON_KITCHEN:12") is household.kitchen
    assert zones.get_virtual_renderer("Kitchen") is None
    assert zones.get_virtual_renderer_for_room(household.dining) is household.kitchen


def test_init_discovers_speakers(monkeypatch) -> None:
    found = {FakeSpeaker("Office", "RINCON_OFFICE")}
    timeouts = []

    def discover(timeout):
        timeouts.append(timeout)
        return found

    monkeypatch.setattr(kernel_mod.soco, "discover", discover)

    kernel = Raumkernel()
    assert kernel.init(timeout=2) == 1
    assert kernel.speakers == found
    assert timeouts == [2]


def test_init_with_nothing_found(monkeypatch) -> None:
    monkeypatch.setattr(kernel_mod.soco, "discover", lambda timeout: None)

    kernel = Raumkernel()
    assert kernel.init() == 0
    assert kernel.speakers == set()


def test_init_from_seed_host(monkeypatch) -> None:
    office = FakeSpeaker("Office", "RINCON_OFFICE")
    hall = FakeSpeaker("Hall", "RINCON_HALL")
    hosts = []

    class FakeSoCo:
        def __init__(self, ip):
            hosts.append(ip)
            self.visible_zones = {office, hall}

    monkeypatch.setattr(kernel_mod, "SoCo", FakeSoCo)

    kernel = Raumkernel()
    assert kernel.init(host="192.168.0.190") == 2
    assert hosts == ["192.168.0.190"]
    assert kernel.manager_disposer.device_manager.get_room_renderer("Hall") is hall


class UnreachableSoCo:
    def __init__(self, ip):
        self.ip = ip

    @property
    def visible_zones(self):
        raise ConnectionError("host unreachable")


def test_init_survives_unreachable_seed_host(monkeypatch, caplog) -> None:
    monkeypatch.setattr(kernel_mod, "SoCo", UnreachableSoCo)

    kernel = Raumkernel()
    assert kernel.init(host="10.0.0.99") == 0
    assert kernel.speakers == set()
    assert "Speaker discovery failed: host unreachable" in caplog.text


def test_failed_discovery_keeps_known_speakers(monkeypatch) -> None:
    office = FakeSpeaker("Office", "RINCON_OFFICE")
    monkeypatch.setattr(kernel_mod.soco, "discover", lambda timeout: {office})
    kernel = Raumkernel()
    kernel.init()

    def broken(timeout):
        raise OSError("network down")

    monkeypatch.setattr(kernel_mod.soco, "discover", broken)

    assert kernel.discover() == 1
    assert kernel.speakers == {office}


def test_rediscover_is_rate_limited(monkeypatch) -> None:
    found = []
    monkeypatch.setattr(kernel_mod.soco, "discover", lambda timeout: set(found))
    kernel = Raumkernel()
    kernel.init()
    assert kernel.speakers == set()

    found.append(FakeSpeaker("Office", "RINCON_OFFICE"))
    assert kernel.rediscover() is False
    assert kernel.speakers == set()

    kernel.rediscover_interval = 0
    assert kernel.rediscover() is True
    assert kernel.manager_disposer.device_manager.get_room_renderer("Office") is found[0]


def test_zone_config_rediscovers_when_empty(monkeypatch) -> None:
    office = FakeSpeaker("Office", "RINCON_OFFICE")
    office.group = FakeGroup("RINCON_OFFICE:1", "Office", office, {office})
    monkeypatch.setattr(kernel_mod.soco, "discover", lambda timeout: {office})

    kernel = Raumkernel()
    config = kernel.manager_disposer.zone_manager.zone_config()

    assert [zone["udn"] for zone in config["zones"]] == ["RINCON_OFFICE:1"]


def test_zone_lookup_returns_group(household) -> None:
    zones = household.kernel.manager_disposer.zone_manager

    group = zones.get_zone("RINCON_KITCHEN:12")
    assert group.coordinator is household.kitchen
    assert kernel_mod.is_zone_group(group) is True
    assert kernel_mod.is_zone_group(household.kitchen) is False
    assert zones.get_zone("RINCON_NOPE:1") is None
