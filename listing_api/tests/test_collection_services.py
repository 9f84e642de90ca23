import pytest

from conftest import make_user, seed_property
from listing_api.exceptions import NotFoundError, ValidationError
from listing_api.repositories import (
    FavoriteRepository,
    PropertyRepository,
    RecommendationRepository,
    UserRepository,
)
from listing_api.services.favorite_service import FavoriteService
from listing_api.services.recommendation_service import RecommendationService


@pytest.fixture()
def favorites(db_session, cache, keys):
    return FavoriteService(
        FavoriteRepository(db_session), PropertyRepository(db_session), cache, keys
    )


@pytest.fixture()
def recommendations(db_session, cache, keys):
    return RecommendationService(
        RecommendationRepository(db_session),
        UserRepository(db_session),
        PropertyRepository(db_session),
        cache,
        keys,
    )


@pytest.fixture()
def alice(db_session):
    return make_user(db_session, "alice@example.com", "Alice")


@pytest.fixture()
def bob(db_session):
    return make_user(db_session, "bob@example.com", "Bob")


@pytest.mark.asyncio
async def test_favorites_are_scoped_and_cached_per_user(
    db_session, favorites, fake_redis, alice, bob
):
    prop = seed_property(db_session, alice)

    await favorites.add_favorite(alice.id, {"propertyId": prop.id})
    mine = await favorites.get_favorites(alice.id)
    theirs = await favorites.get_favorites(bob.id)

    assert [f.property_id for f in mine] == [prop.id]
    assert mine[0].property.title == "Seeded"
    assert theirs == []
    assert "pls:favorites:%d" % alice.id in fake_redis.store
    assert "pls:favorites:%d" % bob.id in fake_redis.store


@pytest.mark.asyncio
async def test_adding_a_favorite_only_invalidates_the_callers_collection(
    db_session, favorites, fake_redis, alice, bob
):
    prop = seed_property(db_session, alice)
    await favorites.get_favorites(alice.id)
    await favorites.get_favorites(bob.id)

    await favorites.add_favorite(alice.id, {"propertyId": prop.id})

    assert "pls:favorites:%d" % alice.id not in fake_redis.store
    assert "pls:favorites:%d" % bob.id in fake_redis.store
    assert len(await favorites.get_favorites(alice.id)) == 1


@pytest.mark.asyncio
async def test_adding_the_same_favorite_twice_returns_the_existing_one(
    db_session, favorites, alice
):
    prop = seed_property(db_session, alice)

    first = await favorites.add_favorite(alice.id, {"propertyId": prop.id})
    second = await favorites.add_favorite(alice.id, {"propertyId": prop.id})

    assert first.id == second.id
    assert len(await favorites.get_favorites(alice.id)) == 1


@pytest.mark.asyncio
async def test_favorite_for_unknown_property(favorites, alice):
    with pytest.raises(NotFoundError):
        await favorites.add_favorite(alice.id, {"propertyId": 12345})
    with pytest.raises(ValidationError):
        await favorites.add_favorite(alice.id, {"propertyId": "abc"})


@pytest.mark.asyncio
async def test_remove_favorite_is_idempotent_and_refreshes_cache(
    db_session, favorites, alice
):
    prop = seed_property(db_session, alice)
    await favorites.add_favorite(alice.id, {"propertyId": prop.id})
    await favorites.get_favorites(alice.id)

    assert await favorites.remove_favorite(alice.id, str(prop.id)) is True
    assert await favorites.get_favorites(alice.id) == []
    assert await favorites.remove_favorite(alice.id, prop.id) is False

    with pytest.raises(ValidationError) as exc:
        await favorites.remove_favorite(alice.id, "nope")
    assert exc.value.errors[0]["field"] == "propertyId"


@pytest.mark.asyncio
async def test_recommendation_is_delivered_to_the_recipient(
    db_session, recommendations, alice, bob
):
    prop = seed_property(db_session, alice)
    await recommendations.get_recommendations(bob.id)

    created = await recommendations.recommend_property(
        alice.id, {"propertyId": prop.id, "recipientEmail": "BOB@example.com"}
    )
    received = await recommendations.get_recommendations(bob.id)

    assert created.to_user_id == bob.id and created.from_user_id == alice.id
    assert [r.id for r in received] == [created.id]
    assert received[0].sender.name == "Alice"
    assert received[0].sender.email == "alice@example.com"
    assert received[0].property.id == prop.id
    assert await recommendations.get_recommendations(alice.id) == []


@pytest.mark.asyncio
async def test_recommendation_only_invalidates_the_recipients_collection(
    db_session, recommendations, fake_redis, alice, bob
):
    prop = seed_property(db_session, alice)
    await recommendations.get_recommendations(alice.id)
    await recommendations.get_recommendations(bob.id)

    await recommendations.recommend_property(
        alice.id, {"propertyId": prop.id, "recipientEmail": "bob@example.com"}
    )

    assert "pls:recommendations:%d" % bob.id not in fake_redis.store
    assert "pls:recommendations:%d" % alice.id in fake_redis.store


@pytest.mark.asyncio
async def test_recommendation_requires_known_recipient_and_property(
    db_session, recommendations, alice
):
    prop = seed_property(db_session, alice)

    with pytest.raises(NotFoundError) as missing_user:
        await recommendations.recommend_property(
            alice.id, {"propertyId": prop.id, "recipientEmail": "ghost@example.com"}
        )
    assert missing_user.value.message == "Recipient not found"

    with pytest.raises(NotFoundError) as missing_property:
        await recommendations.recommend_property(
            alice.id, {"propertyId": 9999, "recipientEmail": "alice@example.com"}
        )
    assert missing_property.value.message == "Property not found"

    with pytest.raises(ValidationError):
        await recommendations.recommend_property(
            alice.id, {"propertyId": prop.id, "recipientEmail": "not-an-email"}
        )
