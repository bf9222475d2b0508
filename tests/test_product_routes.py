import unittest
import uuid

from tests.base import MarketplaceTestCase


class TestProductRoutes(MarketplaceTestCase):

    def setUp(self):
        super().setUp()
        self.seller = self.make_user('seller@example.com')
        self.seller_id = str(self.seller.user_id)

    def create(self, **overrides):
        payload = {
            'name': 'Bicycle',
            'description': 'Hero Sprint, 2 years old',
            'price': 3500,
            'category': 'vehicles',
            'seller_id': self.seller_id,
            'images': [{'url': 'https://img.example.com/bike.jpg', 'alt': 'bike'}],
        }
        payload.update(overrides)
        return self.client.post('/products', json=payload)

    def test_create_and_get(self):
        resp = self.create()
        self.assertEqual(resp.status_code, 201)
        product = resp.get_json()
        self.assertEqual(product['trading_status'], 'available')
        self.assertEqual(product['seller_image'], self.seller.profile_image)
        self.assertEqual(product['price'], 3500.0)

        resp = self.client.get(f"/products/{product['product_id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['name'], 'Bicycle')

    def test_create_validation(self):
        self.assertEqual(self.create(name='').status_code, 400)
        self.assertEqual(self.create(price=-1).status_code, 400)
        self.assertEqual(self.create(price='abc').status_code, 400)
        self.assertEqual(self.create(images=[{'url': 'x'}]).status_code, 400)
        self.assertEqual(self.create(name=42).status_code, 400)
        self.assertEqual(self.create(category=['vehicles']).status_code, 400)
        self.assertEqual(self.create(seller_id=str(uuid.uuid4())).status_code, 404)

    def test_body_must_be_an_object(self):
        resp = self.client.post('/products', json=[{'name': 'Bicycle'}])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error_code'], 'VALIDATION_ERROR')

    def test_get_unknown(self):
        self.assertEqual(self.client.get(f'/products/{uuid.uuid4()}').status_code, 404)
        self.assertEqual(self.client.get('/products/not-a-uuid').status_code, 400)

    def test_list_is_paginated(self):
        for i in range(3):
            self.create(name=f'Item {i}')
        resp = self.client.get('/products?page=1&per_page=2')
        body = resp.get_json()
        self.assertEqual(len(body['data']), 2)
        self.assertEqual(body['pagination']['total'], 3)
        self.assertEqual(body['pagination']['total_pages'], 2)

    def test_update(self):
        product_id = self.create().get_json()['product_id']

        resp = self.client.put(f'/products/{product_id}', json={'price': 3000, 'trading_status': 'sold'})
        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()
        self.assertEqual(body['price'], 3000.0)
        self.assertEqual(body['trading_status'], 'available')

        resp = self.client.put(f'/products/{product_id}', json={'trading_status': 'sold'})
        self.assertEqual(resp.status_code, 400)

        resp = self.client.put(f'/products/{product_id}', json={'description': 7})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.put(f'/products/{product_id}', json=[{'price': 1}])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get(f'/products/{product_id}').get_json()['price'], 3000.0)

    def test_delete(self):
        product_id = self.create().get_json()['product_id']

        resp = self.client.delete(f'/products/{product_id}')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['product']['product_id'], product_id)
        self.assertEqual(self.client.get(f'/products/{product_id}').status_code, 404)

    def test_sold_product_cannot_be_deleted(self):
        buyer = self.make_user('buyer@example.com')
        product_id = self.create().get_json()['product_id']
        self.client.post('/orders/checkout', json={'buyer_id': str(buyer.user_id), 'product_ids': [product_id]})

        resp = self.client.delete(f'/products/{product_id}')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()['error_code'], 'PRODUCT_SOLD')

    def test_user_products(self):
        buyer = self.make_user('buyer@example.com')
        sold_id = self.create(name='Sold one').get_json()['product_id']
        listed_id = self.create(name='Listed one').get_json()['product_id']
        self.client.post('/orders/checkout', json={'buyer_id': str(buyer.user_id), 'product_ids': [sold_id]})

        body = self.client.get(f'/products/user/{self.seller_id}').get_json()
        self.assertEqual([p['product_id'] for p in body['listed_products']], [listed_id])
        self.assertEqual([p['product_id'] for p in body['sold_items']], [sold_id])
        self.assertEqual(body['ordered_items'], [])

        body = self.client.get(f'/products/user/{buyer.user_id}').get_json()
        self.assertEqual([p['product_id'] for p in body['ordered_items']], [sold_id])


if __name__ == '__main__':
    unittest.main()
