from conftest import PREFIX


def _profile(client, viewer, user_id):
    response = client.get(f"{PREFIX}/users/{user_id}", headers=viewer["headers"])
    assert response.status_code == 200, response.text
    return response.json()["data"]


def test_rating_is_mean_of_reviews_across_trips(api, client, driver, passenger):
    first_trip = api.create_trip(driver)
    second_trip = api.create_trip(driver, tripDate="2026-11-27")
    first_booking = api.confirmed_booking(driver, passenger, first_trip["id"])
    api.confirmed_booking(driver, passenger, second_trip["id"])

    rated = client.post(f"{PREFIX}/bookings/{first_booking}/rate", headers=driver["headers"],
                        json={"rating": 4, "comment": "On time"})
    assert rated.status_code == 201
    assert rated.json()["data"]["targetId"] == passenger["id"]

    reviewed = client.post(f"{PREFIX}/reviews", headers=driver["headers"], json={
        "tripId": second_trip["id"], "targetId": passenger["id"], "rating": 2,
    })
    assert reviewed.status_code == 201

    profile = _profile(client, driver, passenger["id"])
    assert profile["rating"] == 3.0
    assert profile["reviewsCount"] == 2

    listed = client.get(f"{PREFIX}/reviews/user/{passenger['id']}", headers=driver["headers"]).json()["data"]
    assert len(listed) == profile["reviewsCount"]
    assert sum(r["rating"] for r in listed) / len(listed) == profile["rating"]


def test_duplicate_review_conflicts(api, client, driver, passenger):
    trip = api.create_trip(driver)
    booking_id = api.confirmed_booking(driver, passenger, trip["id"])
    body = {"tripId": trip["id"], "targetId": passenger["id"], "rating": 5}

    assert client.post(f"{PREFIX}/reviews", headers=driver["headers"], json=body).status_code == 201
    again = client.post(f"{PREFIX}/reviews", headers=driver["headers"], json=body)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "DUPLICATE_ENTRY"

    via_booking = client.post(f"{PREFIX}/bookings/{booking_id}/rate", headers=driver["headers"],
                              json={"rating": 1})
    assert via_booking.status_code == 409
    assert _profile(client, driver, passenger["id"])["reviewsCount"] == 1


def test_passenger_can_review_driver(api, client, driver, passenger):
    trip = api.create_trip(driver)
    api.confirmed_booking(driver, passenger, trip["id"])

    response = client.post(f"{PREFIX}/reviews", headers=passenger["headers"], json={
        "tripId": trip["id"], "targetId": driver["id"], "rating": 5, "comment": "  Smooth ride ",
    })
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["author"]["id"] == passenger["id"]
    assert data["target"]["fullName"] == "Dmitry Driver"
    assert data["comment"] == "Smooth ride"

    profile = _profile(client, passenger, driver["id"])
    assert profile["rating"] == 5.0
    assert profile["reviewsCount"] == 1


def test_review_requires_confirmed_participation(api, client, driver, passenger, other_passenger):
    trip = api.create_trip(driver)
    api.confirmed_booking(driver, passenger, trip["id"])
    api.book(other_passenger, trip["id"], 1)

    # Pending booking is not participation
    pending = client.post(f"{PREFIX}/reviews", headers=other_passenger["headers"], json={
        "tripId": trip["id"], "targetId": driver["id"], "rating": 4,
    })
    assert pending.status_code == 403

    # Passengers of the same trip cannot review each other
    peers = client.post(f"{PREFIX}/reviews", headers=passenger["headers"], json={
        "tripId": trip["id"], "targetId": other_passenger["id"], "rating": 4,
    })
    assert peers.status_code == 403
    assert peers.json()["error"]["code"] == "FORBIDDEN"


def test_review_rating_out_of_range_is_rejected(api, client, driver, passenger):
    trip = api.create_trip(driver)
    api.confirmed_booking(driver, passenger, trip["id"])

    for rating in (0, 6):
        response = client.post(f"{PREFIX}/reviews", headers=driver["headers"], json={
            "tripId": trip["id"], "targetId": passenger["id"], "rating": rating,
        })
        assert response.status_code == 422
    assert _profile(client, driver, passenger["id"])["reviewsCount"] == 0


def test_cannot_review_yourself(api, client, driver):
    trip = api.create_trip(driver)
    response = client.post(f"{PREFIX}/reviews", headers=driver["headers"], json={
        "tripId": trip["id"], "targetId": driver["id"], "rating": 5,
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_review_for_missing_trip_is_not_found(client, driver, passenger):
    response = client.post(f"{PREFIX}/reviews", headers=driver["headers"], json={
        "tripId": 999, "targetId": passenger["id"], "rating": 5,
    })
    assert response.status_code == 404


def test_update_review_recomputes_rating(api, client, driver, passenger, other_passenger):
    trip = api.create_trip(driver)
    api.confirmed_booking(driver, passenger, trip["id"])
    api.confirmed_booking(driver, other_passenger, trip["id"])

    review_id = client.post(f"{PREFIX}/reviews", headers=passenger["headers"], json={
        "tripId": trip["id"], "targetId": driver["id"], "rating": 5,
    }).json()["data"]["id"]
    client.post(f"{PREFIX}/reviews", headers=other_passenger["headers"], json={
        "tripId": trip["id"], "targetId": driver["id"], "rating": 4,
    })
    assert _profile(client, passenger, driver["id"])["rating"] == 4.5

    forbidden = client.put(f"{PREFIX}/reviews/{review_id}", headers=other_passenger["headers"],
                           json={"rating": 1})
    assert forbidden.status_code == 403

    updated = client.put(f"{PREFIX}/reviews/{review_id}", headers=passenger["headers"],
                         json={"rating": 2, "comment": "Late"})
    assert updated.status_code == 200
    assert updated.json()["data"]["rating"] == 2

    profile = _profile(client, passenger, driver["id"])
    assert profile["rating"] == 3.0
    assert profile["reviewsCount"] == 2


def test_update_missing_review_is_not_found(client, passenger):
    response = client.put(f"{PREFIX}/reviews/123", headers=passenger["headers"], json={"rating": 3})
    assert response.status_code == 404


def test_mine_for_trip_and_written_lists(api, client, driver, passenger):
    trip = api.create_trip(driver)
    api.confirmed_booking(driver, passenger, trip["id"])

    before = client.get(f"{PREFIX}/reviews/trip/{trip['id']}/mine", headers=passenger["headers"]).json()["data"]
    assert before == {"exists": False, "review": None}

    client.post(f"{PREFIX}/reviews", headers=passenger["headers"], json={
        "tripId": trip["id"], "targetId": driver["id"], "rating": 5,
    })

    after = client.get(f"{PREFIX}/reviews/trip/{trip['id']}/mine", headers=passenger["headers"]).json()["data"]
    assert after["exists"] is True
    assert after["review"]["rating"] == 5

    written = client.get(f"{PREFIX}/reviews/written", headers=passenger["headers"]).json()["data"]
    assert [r["target"]["id"] for r in written] == [driver["id"]]

    about_driver = client.get(f"{PREFIX}/reviews/my-reviews", headers=driver["headers"]).json()["data"]
    assert [r["author"]["id"] for r in about_driver] == [passenger["id"]]


def test_reviews_of_unknown_user_is_not_found(client, passenger):
    assert client.get(f"{PREFIX}/reviews/user/999", headers=passenger["headers"]).status_code == 404


def test_user_without_reviews_has_zero_rating(client, driver, passenger):
    profile = _profile(client, passenger, driver["id"])
    assert profile["rating"] == 0.0
    assert profile["reviewsCount"] == 0
