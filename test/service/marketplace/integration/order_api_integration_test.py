from fastapi.testclient import TestClient
import pytest


@pytest.mark.integration
class TestCreateOrder:
    def test_create_order_snapshots_product(self, client: TestClient, create_product) -> None:
        product = create_product()
        assert product['price'] == 9.99

        response = client.post(
            '/api/orders',
            json={
                'productId': product['id'],
                'buyerId': 'b1',
                'quantity': 3,
                'shippingAddress': '1 Main St, Springfield',
                'status': 'Delivered',
            },
        )

        assert response.status_code == 201
        order = response.json()
        assert order['id']
        assert order['totalPrice'] == 29.97
        assert order['status'] == 'Pending'
        assert order['sellerId'] == 's1'
        assert order['productName'] == 'Widget'
        assert order['quantity'] == 3
        assert 'orderDate' in order

    def test_create_order_missing_fields(self, client: TestClient) -> None:
        response = client.post('/api/orders', json={'buyerId': 'b1'})

        assert response.status_code == 400
        assert response.json()['message'] == 'ProductId, buyerId, and quantity are required'

    @pytest.mark.parametrize('quantity', [0, -1, 'abc', 1.5, '1e30', 2**31])
    def test_create_order_invalid_quantity(
        self, client: TestClient, create_product, quantity
    ) -> None:
        product = create_product()

        response = client.post(
            '/api/orders', json={'productId': product['id'], 'buyerId': 'b1', 'quantity': quantity}
        )

        assert response.status_code == 400

    def test_create_order_total_beyond_float_range(
        self, client: TestClient, create_product
    ) -> None:
        product = create_product(price=1e308)

        response = client.post(
            '/api/orders', json={'productId': product['id'], 'buyerId': 'b1', 'quantity': 10}
        )

        assert response.status_code == 400
        assert client.get('/api/orders').json() == []

    def test_create_order_unknown_product(self, client: TestClient) -> None:
        response = client.post(
            '/api/orders', json={'productId': 'nonexistent', 'buyerId': 'b1', 'quantity': 1}
        )

        assert response.status_code == 404
        assert response.json()['message'] == 'Product not found'

    def test_order_survives_product_deletion(
        self, client: TestClient, create_product, create_order
    ) -> None:
        product = create_product()
        order = create_order(product['id'], quantity=2)

        assert client.delete(f'/api/products/{product["id"]}').status_code == 200

        response = client.get(f'/api/orders/{order["id"]}')
        assert response.status_code == 200
        body = response.json()
        assert body['productName'] == 'Widget'
        assert body['totalPrice'] == 19.98
        assert body['productId'] == product['id']

    def test_order_snapshot_not_recomputed(
        self, client: TestClient, create_product, create_order
    ) -> None:
        product = create_product()
        order = create_order(product['id'], quantity=3)

        client.put(f'/api/products/{product["id"]}', json={'price': 100, 'name': 'Renamed'})

        body = client.get(f'/api/orders/{order["id"]}').json()
        assert body['totalPrice'] == 29.97
        assert body['productName'] == 'Widget'


@pytest.mark.integration
class TestListOrders:
    def test_list_orders_by_participant(
        self, client: TestClient, create_product, create_order
    ) -> None:
        s1_product = create_product()
        u1_product = create_product(name='Gadget', sellerId='u1')
        bought = create_order(s1_product['id'], buyerId='u1')
        sold = create_order(u1_product['id'], buyerId='b2')
        own = create_order(u1_product['id'], buyerId='u1')
        create_order(s1_product['id'], buyerId='b3')

        response = client.get('/api/orders', params={'userId': 'u1'})

        assert response.status_code == 200
        ids = [order['id'] for order in response.json()]
        assert sorted(ids) == sorted([bought['id'], sold['id'], own['id']])
        assert len(ids) == len(set(ids))

    def test_list_orders_by_role(self, client: TestClient, create_product, create_order) -> None:
        s1_product = create_product()
        u1_product = create_product(name='Gadget', sellerId='u1')
        bought = create_order(s1_product['id'], buyerId='u1')
        sold = create_order(u1_product['id'], buyerId='b2')

        purchases = client.get('/api/orders', params={'userId': 'u1', 'role': 'buyer'}).json()
        sales = client.get('/api/orders', params={'userId': 'u1', 'role': 'seller'}).json()

        assert [order['id'] for order in purchases] == [bought['id']]
        assert [order['id'] for order in sales] == [sold['id']]

    def test_list_orders_invalid_role(self, client: TestClient) -> None:
        response = client.get('/api/orders', params={'userId': 'u1', 'role': 'admin'})

        assert response.status_code == 400

    def test_list_all_orders(self, client: TestClient, create_product, create_order) -> None:
        product = create_product()
        create_order(product['id'], buyerId='b1')
        create_order(product['id'], buyerId='b2')

        response = client.get('/api/orders')

        assert len(response.json()) == 2

    def test_get_nonexistent_order(self, client: TestClient) -> None:
        response = client.get('/api/orders/nonexistent')

        assert response.status_code == 404
        assert response.json() == {'message': 'Order not found', 'error': 'NotFound'}


@pytest.mark.integration
class TestUpdateOrderStatus:
    def test_full_lifecycle(self, client: TestClient, create_product, create_order) -> None:
        order = create_order(create_product()['id'], quantity=3)

        shipped = client.put(f'/api/orders/{order["id"]}/status', json={'status': 'Shipped'})
        delivered = client.put(f'/api/orders/{order["id"]}/status', json={'status': 'Delivered'})

        assert shipped.status_code == 200
        assert shipped.json()['status'] == 'Shipped'
        assert delivered.status_code == 200
        body = delivered.json()
        assert body['status'] == 'Delivered'
        assert 'updatedAt' in body
        # Only status / updatedAt change
        for field in ('productId', 'productName', 'buyerId', 'sellerId', 'quantity', 'totalPrice'):
            assert body[field] == order[field]

    def test_illegal_transition(self, client: TestClient, create_product, create_order) -> None:
        order = create_order(create_product()['id'])
        client.put(f'/api/orders/{order["id"]}/status', json={'status': 'Cancelled'})

        response = client.put(f'/api/orders/{order["id"]}/status', json={'status': 'Pending'})

        assert response.status_code == 400
        assert client.get(f'/api/orders/{order["id"]}').json()['status'] == 'Cancelled'

    def test_unknown_status(self, client: TestClient, create_product, create_order) -> None:
        order = create_order(create_product()['id'])

        response = client.put(f'/api/orders/{order["id"]}/status', json={'status': 'Lost'})

        assert response.status_code == 400

    def test_missing_status(self, client: TestClient, create_product, create_order) -> None:
        order = create_order(create_product()['id'])

        response = client.put(f'/api/orders/{order["id"]}/status', json={})

        assert response.status_code == 400
        assert response.json()['message'] == 'Status is required'

    def test_unknown_order(self, client: TestClient) -> None:
        response = client.put('/api/orders/nonexistent/status', json={'status': 'Shipped'})

        assert response.status_code == 404

    def test_only_seller_updates_status(
        self, client: TestClient, create_product, create_order
    ) -> None:
        order = create_order(create_product()['id'])

        as_buyer = client.put(
            f'/api/orders/{order["id"]}/status',
            json={'status': 'Shipped'},
            headers={'X-User-Id': 'b1'},
        )
        as_seller = client.put(
            f'/api/orders/{order["id"]}/status',
            json={'status': 'Shipped'},
            headers={'X-User-Id': 's1'},
        )

        assert as_buyer.status_code == 403
        assert as_seller.status_code == 200


@pytest.mark.integration
class TestSystemEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_metrics(self, client: TestClient, create_product) -> None:
        create_product()

        response = client.get('/metrics')

        assert response.status_code == 200
        assert 'marketplace_products_created_total' in response.text

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get('/health', headers={'X-Request-Id': 'req-123'})

        assert response.headers['X-Request-Id'] == 'req-123'
        assert client.get('/health').headers['X-Request-Id']
