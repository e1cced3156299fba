def test_recompute_requires_api_key_when_configured(client, product, monkeypatch):
    monkeypatch.setenv('ADMIN_API_KEY', 'secretkey')

    # recompute without header
    resp = client.post(f'/api/products/{product.id}/stats/recompute')
    assert resp.status_code == 401

    # with wrong header
    resp = client.post(f'/api/products/{product.id}/stats/recompute', headers={'X-API-KEY': 'nope'})
    assert resp.status_code == 401

    # with header
    resp = client.post(f'/api/products/{product.id}/stats/recompute', headers={'X-API-KEY': 'secretkey'})
    assert resp.status_code == 200
    assert resp.json() == {'productId': product.id, 'reviewCount': 0, 'averageRating': 0.0}


def test_recompute_open_without_api_key(client, product, monkeypatch):
    monkeypatch.delenv('ADMIN_API_KEY', raising=False)
    client.post(f'/api/products/{product.id}/reviews', json={'comment': 'Really good headphones', 'rating': 4})

    resp = client.post(f'/api/products/{product.id}/stats/recompute')
    assert resp.status_code == 200
    assert resp.json()['reviewCount'] == 1
    assert resp.json()['averageRating'] == 4.0

    assert client.post('/api/products/404/stats/recompute').status_code == 404
