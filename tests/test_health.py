def test_health(client):
    resp = client.get('/api/health')
    assert resp.status_code == 200
    j = resp.json()
    assert j.get('status') == 'ok'
    assert 'version' in j


def test_openapi_lists_resource_groups(client):
    paths = client.get('/openapi.json').json()['paths']
    for prefix in ('/api/v1/categories/', '/api/v1/vouchers/', '/api/v1/checkout/',
                   '/api/v1/payments/payos/webhook', '/api/v1/redirects/'):
        assert prefix in paths


def test_unknown_resource_uses_error_envelope(client):
    resp = client.get('/api/v1/products/does-not-exist')
    assert resp.status_code == 404
    body = resp.json()
    assert body['error'] == 'NOT_FOUND'
    assert 'does-not-exist' in body['message']
