import pytest
from fastapi.testclient import TestClient

from resource_api.exchange.apps import (
    closure_app,
    extension_app,
    generic_app,
    mutable_state_app,
    shared_mutable_app,
    state_app,
)
from resource_api.exchange.rates import (
    AllExchangeRates,
    EurToUsd,
    GbpToUsd,
    SharedRate,
    convert_gbp_to_usd,
    convert_usd_to_gbp,
    format_amount,
)


def convert(client: TestClient, path: str, amount: str):
    return client.request("GET", path, content=amount)


def test_format_amount_drops_trailing_zero():
    assert format_amount(130.0) == "130"
    assert format_amount(0.5) == "0.5"
    assert format_amount(-2.0) == "-2"
    assert format_amount(1e-07) == "0.0000001"
    assert format_amount(1.5e-10) == "0.00000000015"


def test_conversions():
    assert convert_usd_to_gbp("100", 1.3) == "130"
    assert convert_gbp_to_usd("130", 1.3) == "100"


@pytest.mark.parametrize(
    "app_factory",
    [closure_app, shared_mutable_app, state_app, mutable_state_app],
)
def test_usd_to_gbp(app_factory):
    client = TestClient(app_factory(1.3))

    response = convert(client, "/usd_to_gbp", "100")

    assert response.status_code == 200
    assert response.text == "130"


def test_generic_usd_to_gbp():
    client = TestClient(generic_app(AllExchangeRates(gbp=GbpToUsd(1.3), eur=EurToUsd(1.2))))

    assert convert(client, "/usd_to_gbp", "100").text == "130"
    assert convert(client, "/usd_to_eur", "100").text == "120"
    assert convert(client, "/eur_to_usd", "120").text == "100"


def test_generic_app_mounts_only_provided_capabilities():
    client = TestClient(generic_app(GbpToUsd(1.3)))

    assert convert(client, "/usd_to_gbp", "100").text == "130"
    assert convert(client, "/usd_to_eur", "100").status_code == 404


def test_generic_app_rejects_state_without_rates():
    with pytest.raises(TypeError):
        generic_app(object())


def test_shared_rate_change_is_visible_to_handlers():
    rate = SharedRate(1.3)
    client = TestClient(shared_mutable_app(rate))

    assert convert(client, "/usd_to_gbp", "100").text == "130"
    rate.set(1.7)
    assert convert(client, "/usd_to_gbp", "100").text == "170"


def test_set_exchange_rate():
    client = TestClient(mutable_state_app(1.3))

    response = client.put("/set_exchange_rate", content="1.7")
    assert response.status_code == 200

    assert convert(client, "/usd_to_gbp", "100").text == "170"


def test_set_exchange_rate_rejects_garbage():
    client = TestClient(mutable_state_app(1.3))

    response = client.put("/set_exchange_rate", content="lots")
    assert response.status_code == 400
    assert response.json() == {"message": "invalid amount: 'lots'"}
    assert convert(client, "/usd_to_gbp", "100").text == "130"


@pytest.mark.parametrize("rate", ["0", "-1.3", "inf", "nan"])
def test_set_exchange_rate_rejects_unusable_rates(rate):
    """A zero, negative or non-finite rate would break every later division"""
    client = TestClient(mutable_state_app(1.3))

    response = client.put("/set_exchange_rate", content=rate)
    assert response.status_code == 400

    response = convert(client, "/gbp_to_usd", "130")
    assert response.status_code == 200
    assert response.text == "100"


def test_body_that_is_not_utf8_is_400():
    client = TestClient(closure_app(1.3))

    response = convert(client, "/usd_to_gbp", b"\xff\xfe")
    assert response.status_code == 400
    assert "invalid amount" in response.json()["message"]


def test_invalid_amount_is_400():
    client = TestClient(closure_app(1.3))

    response = convert(client, "/usd_to_gbp", "")
    assert response.status_code == 400


def test_extension_usd_to_gbp():
    client = TestClient(extension_app(1.3))

    assert convert(client, "/usd_to_gbp", "100").text == "130"
    assert convert(client, "/gbp_to_usd", "130").text == "100"


def test_missing_extension_is_500():
    client = TestClient(extension_app())

    response = convert(client, "/usd_to_gbp", "100")
    assert response.status_code == 500
    assert response.json() == {"message": "Missing request extension: GbpToUsd"}


def test_main_app_exchange_routes(memory_client: TestClient):
    assert convert(memory_client, "/api/exchange/usd_to_gbp", "100").text == "130"

    memory_client.put("/api/exchange/set_exchange_rate", content="1.7")

    assert convert(memory_client, "/api/exchange/usd_to_gbp", "100").text == "170"
