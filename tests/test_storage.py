import threading

import pytest

from offer_service.errors import InvalidOfferError, NotFoundError
from offer_service.models import OfferType


def test_add_assigns_increasing_ids(store):
    first = store.add(101, "FLATX", 10, ["p1"])
    second = store.add(102, "FLAT%", 10, ["p2"])

    assert first.id < second.id
    assert first.offer_type is OfferType.FLAT_AMOUNT
    assert second.offer_type is OfferType.FLAT_PERCENT


@pytest.mark.parametrize("raw", ["FLATX", "flatx", " FLAT% ", "FLAT_AMOUNT", "flat_percent", OfferType.FLAT_PERCENT])
def test_add_accepts_known_types(store, raw):
    offer = store.add(101, raw, 10, ["p1"])
    assert offer.offer_type in (OfferType.FLAT_AMOUNT, OfferType.FLAT_PERCENT)


@pytest.mark.parametrize(
    "offer_type, value",
    [
        ("INVALID_TYPE", 10),
        ("", 10),
        (None, 10),
        ("FLATX", -1),
        ("FLAT%", -5),
        ("FLAT%", 101),
        ("FLATX", 10.5),
        ("FLATX", True),
    ],
)
def test_add_rejects_invalid_offers(store, offer_type, value):
    with pytest.raises(InvalidOfferError):
        store.add(107, offer_type, value, ["pX"])

    assert store.candidates_for(107, "pX") == []
    with pytest.raises(NotFoundError):
        store.offers_for(107)


def test_add_rejects_bad_segments(store):
    with pytest.raises(InvalidOfferError):
        store.add(1, "FLATX", 10, "p1")
    with pytest.raises(InvalidOfferError):
        store.add(1, "FLATX", 10, ["p1", 2])


def test_flat_amount_above_hundred_is_allowed(store):
    offer = store.add(1, "FLATX", 500, ["p1"])
    assert offer.offer_value == 500


def test_segments_are_deduplicated(store):
    offer = store.add(1, "FLATX", 10, ["p1", "p2", "p1"])
    assert offer.customer_segments == ("p1", "p2")


def test_candidates_filtered_by_segment(store):
    p1 = store.add(104, "FLATX", 25, ["p1", "p3"])
    store.add(104, "FLATX", 25, ["p2"])
    store.add(999, "FLATX", 25, ["p1"])

    assert store.candidates_for(104, "p1") == [p1]
    assert store.candidates_for(104, "p4") == []


def test_candidates_for_unresolved_segment_is_empty(store):
    store.add(103, "FLATX", 50, ["pX"])
    assert store.candidates_for(103, None) == []


def test_empty_segment_set_matches_no_one(store):
    store.add(1, "FLATX", 10, [])
    assert store.candidates_for(1, "p1") == []
    assert store.candidates_for(1, "") == []


def test_registrations_accumulate(store):
    first = store.add(110, "FLATX", 20, ["p10"])
    second = store.add(110, "FLATX", 5, ["p10"])

    assert store.candidates_for(110, "p10") == [first, second]
    assert store.offers_for(110) == [first, second]


def test_offers_for_unknown_restaurant(store):
    with pytest.raises(NotFoundError):
        store.offers_for(12345)


def test_remove_withdraws_offer(store):
    first = store.add(1, "FLATX", 20, ["p1"])
    second = store.add(1, "FLAT%", 5, ["p1"])

    assert store.remove(first.id) == first
    assert store.candidates_for(1, "p1") == [second]
    assert store.all_offers() == [second]

    with pytest.raises(NotFoundError):
        store.remove(first.id)


def test_concurrent_registrations_are_not_lost(store):
    def register(n):
        for i in range(50):
            store.add(1, "FLATX", i, [f"p{n}"])

    threads = [threading.Thread(target=register, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    offers = store.offers_for(1)
    assert len(offers) == 400
    assert len({o.id for o in offers}) == 400


def test_stored_segments_cannot_be_mutated(store):
    labels = ["p1"]
    offer = store.add(1, "FLATX", 10, labels)

    labels.append("p2")
    with pytest.raises(AttributeError):
        offer.customer_segments.append("p2")

    assert offer.customer_segments == ("p1",)
    assert store.candidates_for(1, "p2") == []


def test_readers_see_whole_registrations(store):
    done = threading.Event()
    observed = []

    def write():
        for i in range(200):
            store.add(1, "FLATX", i, ["p1"])
        done.set()

    def read():
        while not done.is_set():
            ids = [o.id for o in store.candidates_for(1, "p1")]
            if not observed or ids != observed[-1]:
                observed.append(ids)

    reader = threading.Thread(target=read)
    writer = threading.Thread(target=write)
    reader.start()
    writer.start()
    writer.join()
    reader.join()

    final_ids = [o.id for o in store.candidates_for(1, "p1")]
    assert len(final_ids) == 200
    assert final_ids == sorted(final_ids)
    for ids in observed:
        assert ids == final_ids[:len(ids)]
