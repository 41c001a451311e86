"""
Form validation tests for the domain models
"""
import pytest
from decimal import Decimal
from pydantic import ValidationError

from app.domain.customer import ContactMessageCreate, ProfileUpdate
from app.domain.order import CheckoutRequest, OrderStatusUpdate, PaymentRequest
from app.domain.product import ProductCreate, ProductUpdate


def product_form(**overrides):
    data = {
        'name': 'Cricket Bat',
        'slug': 'cricket-bat',
        'category': 'Cricket',
        'price': '4500',
        'sku': 'CR-BAT-1',
        'inventory': 5,
        'images': ['https://cdn.example.com/bat.jpg'],
    }
    data.update(overrides)
    return data


def checkout_form(**overrides):
    data = {
        'email': 'ali@example.com',
        'first_name': 'Ali',
        'last_name': 'Khan',
        'phone': '03001234567',
        'address': '12 Mall Road',
        'city': 'Lahore',
        'postal_code': '54000',
        'payment_method': 'jazzcash',
        'agree_terms': True,
        'items': [{'product_id': 'p1', 'quantity': 1}],
    }
    data.update(overrides)
    return data


class TestProductForms:

    def test_valid_product(self):
        form = ProductCreate(**product_form())

        row = form.to_row()
        assert row['price'] == Decimal('4500')
        assert row['images'] == ['https://cdn.example.com/bat.jpg']

    @pytest.mark.parametrize("slug", ["Cricket-Bat", "cricket bat", "bat_1", "ba"])
    def test_invalid_slug(self, slug):
        with pytest.raises(ValidationError):
            ProductCreate(**product_form(slug=slug))

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProductCreate(**product_form(price='0'))

    def test_inventory_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            ProductCreate(**product_form(inventory=-1))

    def test_images_must_be_urls(self):
        with pytest.raises(ValidationError):
            ProductCreate(**product_form(images=['not a url']))

    def test_update_only_sends_provided_fields(self):
        form = ProductUpdate(price='999', is_active=False)

        assert form.to_row() == {'price': Decimal('999'), 'is_active': False}


class TestCheckoutForm:

    def test_valid_form(self):
        form = CheckoutRequest(**checkout_form())

        assert form.customer_name == 'Ali Khan'

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            CheckoutRequest(**checkout_form(email='not-an-email'))

    def test_short_phone(self):
        with pytest.raises(ValidationError):
            CheckoutRequest(**checkout_form(phone='0300'))

    def test_blank_city(self):
        with pytest.raises(ValidationError):
            CheckoutRequest(**checkout_form(city='   '))

    def test_requires_items(self):
        with pytest.raises(ValidationError):
            CheckoutRequest(**checkout_form(items=[]))

    def test_item_quantity_positive(self):
        with pytest.raises(ValidationError):
            CheckoutRequest(**checkout_form(items=[{'product_id': 'p1', 'quantity': 0}]))


class TestOtherForms:

    def test_contact_message_rules(self):
        ContactMessageCreate(
            name='Ali', email='ali@example.com', phone='03001234567',
            subject='Order query', message='Where is my order?'
        )

        with pytest.raises(ValidationError):
            ContactMessageCreate(
                name='A', email='ali@example.com', phone='03001234567',
                subject='Order query', message='Where is my order?'
            )
        with pytest.raises(ValidationError):
            ContactMessageCreate(
                name='Ali', email='ali@example.com', phone='03001234567',
                subject='Hi', message='Where is my order?'
            )
        with pytest.raises(ValidationError):
            ContactMessageCreate(
                name='Ali', email='ali@example.com', phone='03001234567',
                subject='Order query', message='Hello'
            )

    def test_profile_full_name_min_length(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(full_name='A')

    def test_order_status_must_be_known(self):
        assert OrderStatusUpdate(status='shipped').status == 'shipped'
        with pytest.raises(ValidationError):
            OrderStatusUpdate(status='lost')

    def test_payment_request_accepts_camel_case_order_id(self):
        request = PaymentRequest(orderId='o1', amount='1500')

        assert request.order_id == 'o1'
        assert request.amount == Decimal('1500')
        assert request.currency == 'PKR'
