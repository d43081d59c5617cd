from decimal import Decimal

import pytest

from models import db
from models.product import Product, ProductVariant
from services import catalog
from services.errors import InvalidReference, NotFound, ValidationError


def test_variants_define_total_stock(make_product):
    product = make_product(total_stock=99, variants=[
        {'id': 'v1', 'name': 'Small', 'stock': 5},
        {'id': 'v2', 'name': 'Large', 'stock': 7},
    ])
    assert product.total_stock == 12
    assert [v.id for v in product.variants] == ['v1', 'v2']


@pytest.mark.parametrize('alias', ['total_stock', 'stock', 'totalStock'])
def test_stock_aliases_without_variants(make_product, alias):
    product = make_product(**{'total_stock': None, alias: '8'})
    assert product.total_stock == 8


def test_price_is_stored_as_money(make_product):
    product = make_product(price='12.5')
    assert product.price == Decimal('12.500')


@pytest.mark.parametrize('fields', [{'price': '-1'}, {'price': 'cheap'}, {'total_stock': 'lots'}, {'total_stock': -3}])
def test_malformed_numbers_are_rejected(make_product, fields):
    with pytest.raises(ValidationError):
        make_product(**fields)
    assert Product.query.count() == 0


def test_update_recomputes_total_stock_from_variants(make_product):
    product = make_product(variants=[{'id': 'v1', 'name': 'Small', 'stock': 5}])
    catalog.update_product(product.id, {
        'totalStock': 100,
        'variants': [{'id': 'v1', 'name': 'Small', 'stock': 2}, {'name': 'Gift box', 'stock': 4}],
    })
    product = catalog.get_product(product.id)
    assert product.total_stock == 6
    assert len(product.variants) == 2
    assert product.variants[1].id


def test_removed_variants_are_deleted(make_product):
    product = make_product(variants=[{'id': 'v1', 'name': 'Small', 'stock': 5},
                                     {'id': 'v2', 'name': 'Large', 'stock': 1}])
    catalog.update_product(product.id, {'variants': [{'id': 'v2', 'name': 'Large', 'stock': 1}]})
    assert ProductVariant.query.filter_by(product_id=product.id).count() == 1
    assert catalog.get_product(product.id).total_stock == 1


def test_duplicate_variant_ids_are_rejected(make_product):
    with pytest.raises(ValidationError):
        make_product(variants=[{'id': 'v1', 'name': 'A', 'stock': 1}, {'id': 'v1', 'name': 'B', 'stock': 1}])


def test_restock_variants(make_product):
    product = make_product(variants=[{'id': 'v1', 'name': 'Small', 'stock': 5},
                                     {'id': 'v2', 'name': 'Large', 'stock': 1}])
    catalog.update_product_stock(product.id, variants=[{'id': 'v2', 'stock': 10}])
    assert catalog.get_product(product.id).total_stock == 15
    with pytest.raises(ValidationError):
        catalog.update_product_stock(product.id, total_stock=3)


def test_empty_category_means_none_and_unknown_is_rejected(make_product):
    assert make_product(category_id='').category_id is None
    with pytest.raises(InvalidReference):
        make_product(name='Musk', category_id=999)


def test_deleting_category_detaches_products(make_product):
    category = catalog.create_category({'name': 'Perfumes', 'name_ar': 'عطور'})
    product = make_product(category_id=category.id)
    catalog.delete_category(category.id)
    db.session.expire_all()
    product = catalog.get_product(product.id)
    assert product.category_id is None
    assert catalog.list_categories() == []


def test_category_names_are_unique(app_ctx):
    catalog.create_category({'name': 'Incense'})
    with pytest.raises(ValidationError):
        catalog.create_category({'name': 'Incense'})


def test_deleting_product_removes_variants(make_product):
    product = make_product(variants=[{'id': 'v1', 'name': 'Small', 'stock': 5}])
    catalog.delete_product(product.id)
    assert ProductVariant.query.count() == 0
    with pytest.raises(NotFound):
        catalog.get_product(product.id)


def test_decrement_stock_refuses_to_oversell(make_product):
    product = make_product(variants=[{'id': 'v1', 'name': 'Small', 'stock': 2}])
    assert catalog.decrement_stock(product, 'v1', 3) is False
    assert catalog.decrement_stock(product, 'v1', 2) is True
    db.session.commit()
    db.session.expire_all()
    product = catalog.get_product(product.id)
    assert product.variants[0].stock == 0
    assert product.total_stock == 0


def test_variant_decrements_keep_total_in_step(make_product):
    product = make_product(variants=[{'id': 'v1', 'name': 'Small', 'stock': 4},
                                     {'id': 'v2', 'name': 'Large', 'stock': 6}])
    assert catalog.decrement_stock(product, 'v1', 1) is True
    assert catalog.decrement_stock(product, 'v2', 5) is True
    db.session.commit()
    db.session.expire_all()
    product = catalog.get_product(product.id)
    assert [v.stock for v in product.variants] == [3, 1]
    assert product.total_stock == 4


# ---------------------------------------------------------------- HTTP

def test_catalog_reads_are_public(client, admin_client):
    response = admin_client.post('/api/products', json={'name': 'Bakhoor', 'price': 3.5, 'stock': 4})
    assert response.status_code == 201
    product_id = response.get_json()['id']

    assert client.get('/api/products').status_code == 200
    data = client.get(f'/api/products/{product_id}').get_json()
    assert data['price'] == 3.5
    assert data['total_stock'] == 4


def test_catalog_writes_need_login(client):
    response = client.post('/api/products', json={'name': 'Bakhoor', 'price': 3.5})
    assert response.status_code == 401
    assert 'error' in response.get_json()


def test_missing_price_is_a_validation_error(admin_client):
    response = admin_client.post('/api/products', json={'name': 'Bakhoor'})
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_unknown_product_is_404(client):
    assert client.get('/api/products/12345').status_code == 404


def test_category_crud_over_http(admin_client):
    response = admin_client.post('/api/categories', json={'name': 'Oils', 'nameAr': 'زيوت'})
    assert response.status_code == 201
    category = response.get_json()
    assert category['name_ar'] == 'زيوت'

    response = admin_client.put(f"/api/categories/{category['id']}", json={'name': 'Oud Oils'})
    assert response.get_json()['name'] == 'Oud Oils'
    assert admin_client.delete(f"/api/categories/{category['id']}").status_code == 200
    assert admin_client.get(f"/api/categories/{category['id']}").status_code == 404


def test_stock_patch_over_http(admin_client):
    product = admin_client.post('/api/products', json={
        'name': 'Rose water', 'price': '2', 'variants': [{'id': 'v1', 'name': '250ml', 'stock': 1}],
    }).get_json()
    response = admin_client.patch(f"/api/products/{product['id']}/stock",
                                  json={'variants': [{'id': 'v1', 'stock': 9}]})
    assert response.status_code == 200
    assert response.get_json()['total_stock'] == 9


def test_product_id_beyond_column_range_is_404(client):
    assert client.get('/api/products/100000000000000000000').status_code == 404


def test_non_object_body_is_rejected(admin_client):
    response = admin_client.post('/api/products', json=['Bakhoor', 3.5])
    assert response.status_code == 400
    assert 'error' in response.get_json()
