from ficsitfetch.services.cache import Operation, RequestKey, ResponseCache


def test_entry_served_until_window_closes(clock):
    cache = ResponseCache(ttl=300, clock=clock)
    key = RequestKey(Operation.GET_MOD, ("AreaActions",))
    payload = {"id": "AreaActions"}
    cache.set(key, payload)

    clock.advance(299.999)
    assert cache.get(key) is payload

    clock.advance(0.001)
    assert cache.get(key) is None


def test_missing_key_is_absent(clock):
    cache = ResponseCache(clock=clock)
    assert cache.get(RequestKey(Operation.GET_AVAILABLE_MODS)) is None


def test_stale_entry_is_kept_until_overwritten(clock):
    cache = ResponseCache(ttl=10, clock=clock)
    key = RequestKey(Operation.GET_SML_VERSIONS)
    cache.set(key, ["old"])
    clock.advance(60)

    assert key not in cache
    assert len(cache) == 1

    cache.set(key, ["new"])
    assert cache.get(key) == ["new"]
    assert len(cache) == 1


def test_keys_of_different_operations_do_not_collide(clock):
    cache = ResponseCache(clock=clock)
    cache.set(RequestKey(Operation.GET_MOD, ("SML",)), "mod")
    cache.set(RequestKey(Operation.GET_MOD_VERSIONS, ("SML",)), "versions")

    assert cache.get(RequestKey(Operation.GET_MOD, ("SML",))) == "mod"
    assert cache.get(RequestKey(Operation.GET_MOD_VERSIONS, ("SML",))) == "versions"


def test_download_link_key_keeps_arguments_apart(clock):
    cache = ResponseCache(clock=clock)
    cache.set(RequestKey(Operation.GET_MOD_DOWNLOAD_LINK, ("a_b", "1.0.0")), "first")

    assert cache.get(RequestKey(Operation.GET_MOD_DOWNLOAD_LINK, ("a", "b_1.0.0"))) is None


def test_clear(clock):
    cache = ResponseCache(clock=clock)
    cache.set(RequestKey(Operation.GET_AVAILABLE_MODS), [])
    cache.clear()
    assert len(cache) == 0


def test_request_key_str():
    assert str(RequestKey(Operation.GET_AVAILABLE_MODS)) == "getAvailableMods"
    assert str(RequestKey(Operation.GET_MOD, ("SML",))) == "getMod(SML)"
