import unittest
import uuid

from tests.base import MarketplaceTestCase, PASSWORD


class TestAuthRoutes(MarketplaceTestCase):

    def signup_payload(self, **overrides):
        payload = {
            'first_name': 'Asha',
            'last_name': 'Rao',
            'email': 'asha@example.com',
            'age': 20,
            'contact_number': '9123456780',
            'password': PASSWORD,
        }
        payload.update(overrides)
        return payload

    def test_signup_and_login(self):
        resp = self.client.post('/auth/signup', json=self.signup_payload())
        self.assertEqual(resp.status_code, 201)
        body = resp.get_json()
        self.assertIn('access_token', body)
        self.assertEqual(body['user']['email'], 'asha@example.com')
        self.assertNotIn('password_hash', body['user'])

        resp = self.client.post('/auth/login', json={'email': 'asha@example.com', 'password': PASSWORD})
        self.assertEqual(resp.status_code, 200)
        token = resp.get_json()['access_token']

        resp = self.client.get('/users/profile', headers={'Authorization': f'Bearer {token}'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['user']['first_name'], 'Asha')

    def test_signup_validation(self):
        cases = [
            self.signup_payload(first_name=''),
            self.signup_payload(email='not-an-email'),
            self.signup_payload(contact_number='12345'),
            self.signup_payload(age=0),
            self.signup_payload(password='short'),
            self.signup_payload(first_name=5),
            self.signup_payload(last_name=['Rao']),
            self.signup_payload(email={'address': 'asha@example.com'}),
        ]
        for payload in cases:
            resp = self.client.post('/auth/signup', json=payload)
            self.assertEqual(resp.status_code, 400, payload)

    def test_duplicate_email(self):
        self.client.post('/auth/signup', json=self.signup_payload())
        resp = self.client.post('/auth/signup', json=self.signup_payload(first_name='Other'))
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()['error_code'], 'EMAIL_EXISTS')

    def test_login_failures(self):
        self.make_user('known@example.com')

        resp = self.client.post('/auth/login', json={'email': 'known@example.com'})
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post('/auth/login', json={'email': 'nobody@example.com', 'password': PASSWORD})
        self.assertEqual(resp.status_code, 404)

        resp = self.client.post('/auth/login', json={'email': 'known@example.com', 'password': 'wrong-password'})
        self.assertEqual(resp.status_code, 401)

    def test_logout_revokes_token(self):
        user = self.make_user('leaving@example.com')
        headers = self.auth_headers(user)

        resp = self.client.post('/auth/logout', headers=headers)
        self.assertEqual(resp.status_code, 200)

        resp = self.client.get('/users/profile', headers=headers)
        self.assertEqual(resp.status_code, 401)

    def test_profile_requires_token(self):
        self.assertEqual(self.client.get('/users/profile').status_code, 401)

    def test_body_must_be_an_object(self):
        resp = self.client.post('/auth/signup', json=[self.signup_payload()])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error_code'], 'VALIDATION_ERROR')

        resp = self.client.post('/auth/login', json=['asha@example.com', PASSWORD])
        self.assertEqual(resp.status_code, 400)


class TestProfileRoutes(MarketplaceTestCase):

    def setUp(self):
        super().setUp()
        self.user = self.make_user('me@example.com', first_name='Me')
        self.other = self.make_user('you@example.com', first_name='You')
        self.headers = self.auth_headers(self.user)

    def test_view_other_profile(self):
        resp = self.client.get(f'/users/profile/{self.other.user_id}', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        user = resp.get_json()['user']
        self.assertEqual(user['first_name'], 'You')
        self.assertNotIn('cart_items', user)

        resp = self.client.get(f'/users/profile/{uuid.uuid4()}', headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_update_profile(self):
        payload = {
            'first_name': 'Updated',
            'last_name': 'Name',
            'email': 'me@example.com',
            'age': 22,
            'contact_number': '9000000000',
            'profile_image': 'https://img.example.com/me.png',
        }
        resp = self.client.put('/users/profile', json=payload, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['user']['first_name'], 'Updated')

        payload['email'] = 'you@example.com'
        resp = self.client.put('/users/profile', json=payload, headers=self.headers)
        self.assertEqual(resp.status_code, 409)

        resp = self.client.put('/users/profile', json=dict(payload, email='me@example.com', first_name=7),
                               headers=self.headers)
        self.assertEqual(resp.status_code, 400)

        del payload['profile_image']
        resp = self.client.put('/users/profile', json=payload, headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_reviews(self):
        resp = self.client.post(f'/users/reviews/{self.other.user_id}', json={
            'rating': 4,
            'review': 'Quick and friendly handoff',
            'reviewer_id': str(self.user.user_id),
        })
        self.assertEqual(resp.status_code, 200)
        reviews = resp.get_json()['seller_reviews']
        self.assertEqual(len(reviews), 1)
        self.assertEqual(reviews[0]['reviewer']['first_name'], 'Me')

        resp = self.client.get(f'/users/reviews/{self.other.user_id}')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()[0]['rating'], 4)

    def test_review_validation(self):
        url = f'/users/reviews/{self.other.user_id}'
        reviewer_id = str(self.user.user_id)

        resp = self.client.post(url, json={'rating': 4, 'reviewer_id': reviewer_id})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(url, json={'rating': 6, 'review': 'x', 'reviewer_id': reviewer_id})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(url, json={'rating': 4.7, 'review': 'x', 'reviewer_id': reviewer_id})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(url, json={'rating': 4, 'review': 5, 'reviewer_id': reviewer_id})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(url, json={'rating': 3, 'review': 'x', 'reviewer_id': str(self.other.user_id)})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(url, json={'rating': 3, 'review': 'x', 'reviewer_id': str(uuid.uuid4())})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.client.get(url).get_json(), [])


class TestCartRoutes(MarketplaceTestCase):

    def setUp(self):
        super().setUp()
        seller = self.make_user('seller@example.com')
        self.buyer = self.make_user('buyer@example.com')
        self.headers = self.auth_headers(self.buyer)
        self.product_id = str(self.make_product(seller, 'Desk lamp').product_id)

    def cart(self):
        resp = self.client.get('/users/cart', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        return resp.get_json()['user']['cart_items']

    def test_add_update_remove(self):
        resp = self.client.post('/users/cart/add', json={'product_id': self.product_id}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.client.post('/users/cart/add', json={'product_id': self.product_id, 'quantity': 2},
                         headers=self.headers)
        items = self.cart()
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]['quantity'], 3)
        self.assertEqual(items[0]['product']['product_id'], self.product_id)

        resp = self.client.put('/users/cart/update-quantity',
                               json={'product_id': self.product_id, 'quantity': 1}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.cart()[0]['quantity'], 1)

        resp = self.client.delete(f'/users/cart/remove/{self.product_id}', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.cart(), [])

    def test_add_errors(self):
        resp = self.client.post('/users/cart/add', json={'product_id': str(uuid.uuid4())}, headers=self.headers)
        self.assertEqual(resp.status_code, 404)

        resp = self.client.post('/users/cart/add', json={'product_id': self.product_id, 'quantity': 0},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 400)

        resp = self.client.put('/users/cart/update-quantity',
                               json={'product_id': self.product_id, 'quantity': 2}, headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_sold_product_cannot_be_added(self):
        other = self.make_user('other@example.com')
        self.client.post('/orders/checkout', json={
            'buyer_id': str(other.user_id), 'product_ids': [self.product_id],
        })
        resp = self.client.post('/users/cart/add', json={'product_id': self.product_id}, headers=self.headers)
        self.assertEqual(resp.status_code, 409)

    def test_sold_product_already_in_cart_cannot_be_added_again(self):
        self.client.post('/users/cart/add', json={'product_id': self.product_id}, headers=self.headers)
        other = self.make_user('other@example.com')
        resp = self.client.post('/orders/checkout', json={
            'buyer_id': str(other.user_id), 'product_ids': [self.product_id],
        })
        self.assertEqual(resp.status_code, 201)

        resp = self.client.post('/users/cart/add', json={'product_id': self.product_id, 'quantity': 2},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()['error_code'], 'PRODUCT_UNAVAILABLE')
        self.assertEqual(self.cart()[0]['quantity'], 1)

    def test_checkout_empties_cart(self):
        self.client.post('/users/cart/add', json={'product_id': self.product_id}, headers=self.headers)
        resp = self.client.post('/orders/checkout', json={
            'buyer_id': str(self.buyer.user_id), 'product_ids': [self.product_id],
        })
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.cart(), [])


if __name__ == '__main__':
    unittest.main()
