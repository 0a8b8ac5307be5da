from conftest import PREFIX


def test_passenger_cannot_create_trip(api, client, passenger):
    response = client.post(f"{PREFIX}/trips", headers=passenger["headers"], json={
        "fromCity": "A", "toCity": "B", "tripDate": "2026-11-20", "tripTime": "10:00",
        "price": 10, "seats": 2,
    })
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_create_trip_sets_available_seats_to_capacity(api, driver):
    trip = api.create_trip(driver, seats=4, price=250, noSmoking=True)
    assert trip["seats"] == 4
    assert trip["availableSeats"] == 4
    assert trip["status"] == "active"
    assert trip["noSmoking"] is True
    assert trip["tripTime"] == "09:30"


def test_create_trip_rejects_out_of_range_seats(client, driver):
    response = client.post(f"{PREFIX}/trips", headers=driver["headers"], json={
        "fromCity": "A", "toCity": "B", "tripDate": "2026-11-20", "tripTime": "10:00",
        "price": 10, "seats": 9,
    })
    assert response.status_code == 422


def test_search_is_case_insensitive_partial_and_ordered(api, client, driver):
    later = api.create_trip(driver, fromCity="Moscow", toCity="Kazan", tripDate="2026-11-21", tripTime="08:00")
    earlier_late = api.create_trip(driver, fromCity="Moscow", toCity="Kazan", tripDate="2026-11-20", tripTime="18:00")
    earlier_early = api.create_trip(driver, fromCity="moscow", toCity="KAZAN", tripDate="2026-11-20", tripTime="07:15")
    api.create_trip(driver, fromCity="Kazan", toCity="Moscow")

    response = client.get(f"{PREFIX}/trips/search", params={"from": "MOS", "to": "kaz"})
    assert response.status_code == 200
    body = response.json()
    ids = [t["id"] for t in body["data"]]
    assert ids == [earlier_early["id"], earlier_late["id"], later["id"]]
    assert body["meta"]["total"] == 3
    # Contact details stay on the detail view
    assert "phone" not in body["data"][0]["driver"]


def test_search_filters_by_exact_date(api, client, driver):
    api.create_trip(driver, tripDate="2026-11-20")
    wanted = api.create_trip(driver, tripDate="2026-11-22")

    data = client.get(f"{PREFIX}/trips/search", params={"date": "2026-11-22"}).json()["data"]
    assert [t["id"] for t in data] == [wanted["id"]]


def test_search_hides_cancelled_and_full_trips(api, client, driver, passenger):
    cancelled = api.create_trip(driver)
    client.patch(f"{PREFIX}/trips/{cancelled['id']}/cancel", headers=driver["headers"])
    full = api.create_trip(driver, seats=1)
    api.confirmed_booking(driver, passenger, full["id"], seats=1)
    open_trip = api.create_trip(driver)

    data = client.get(f"{PREFIX}/trips/search").json()["data"]
    assert [t["id"] for t in data] == [open_trip["id"]]


def test_search_paginates(api, client, driver):
    for day in range(1, 4):
        api.create_trip(driver, tripDate=f"2026-12-0{day}")

    body = client.get(f"{PREFIX}/trips/search", params={"page": 2, "limit": 2}).json()
    assert len(body["data"]) == 1
    assert body["meta"] == {
        "page": 2, "limit": 2, "total": 3, "totalPages": 2, "hasNext": False, "hasPrev": True,
    }


def test_get_trip_exposes_driver_contact(api, client, driver):
    trip = api.create_trip(driver)
    detail = api.get_trip(trip["id"])
    assert detail["driver"]["fullName"] == "Dmitry Driver"
    assert detail["driver"]["phone"] == "+7 900 000 00 00"


def test_get_missing_trip_is_not_found(client):
    response = client.get(f"{PREFIX}/trips/999")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_only_owner_can_cancel_or_complete(api, client, driver):
    other_driver = api.register("Other Driver", "other@example.com", is_driver=True)
    trip = api.create_trip(driver)

    for action in ("cancel", "complete"):
        response = client.patch(f"{PREFIX}/trips/{trip['id']}/{action}", headers=other_driver["headers"])
        assert response.status_code == 403


def test_terminal_trip_status_cannot_change(api, client, driver):
    completed = api.create_trip(driver)
    assert client.patch(f"{PREFIX}/trips/{completed['id']}/complete", headers=driver["headers"]).status_code == 200

    again = client.patch(f"{PREFIX}/trips/{completed['id']}/complete", headers=driver["headers"])
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "TRIP_NOT_ACTIVE"
    assert client.patch(f"{PREFIX}/trips/{completed['id']}/cancel", headers=driver["headers"]).status_code == 409

    cancelled = api.create_trip(driver)
    assert client.patch(f"{PREFIX}/trips/{cancelled['id']}/cancel", headers=driver["headers"]).status_code == 200
    assert client.patch(f"{PREFIX}/trips/{cancelled['id']}/complete", headers=driver["headers"]).status_code == 409


def test_my_trips_for_driver_and_passenger(api, client, driver, passenger):
    trip = api.create_trip(driver)
    api.book(passenger, trip["id"], 2)

    driver_view = client.get(f"{PREFIX}/trips/my-trips", headers=driver["headers"]).json()["data"]
    assert [t["id"] for t in driver_view] == [trip["id"]]

    passenger_view = client.get(f"{PREFIX}/trips/my-trips", headers=passenger["headers"]).json()["data"]
    assert len(passenger_view) == 1
    assert passenger_view[0]["bookingStatus"] == "pending"
    assert passenger_view[0]["seatsBooked"] == 2
    assert passenger_view[0]["tripStatus"] == "active"
