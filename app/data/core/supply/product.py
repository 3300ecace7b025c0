from app.data.core.user_created_base import UserCreatedBase
from app import db


class Product(UserCreatedBase):
    """Catalog product; every product is sourced from a single supplier"""
    __tablename__ = 'products'

    sku = db.Column(db.String(64), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=True)
    unit_cost = db.Column(db.Float, nullable=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=False)
    is_active = db.Column(db.Boolean, default=True)

    supplier = db.relationship('Supplier', back_populates='products')
    variants = db.relationship('ProductVariant', back_populates='product')

    def __repr__(self):
        return f'<Product {self.sku}>'


class ProductVariant(UserCreatedBase):
    """Sellable variant (size/color) of a product; the unit forecasts are kept for"""
    __tablename__ = 'product_variants'

    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    sku = db.Column(db.String(64), unique=True, nullable=False)
    size = db.Column(db.String(20), nullable=True)
    color = db.Column(db.String(40), nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    product = db.relationship('Product', back_populates='variants')

    @property
    def lead_time_days(self):
        """Supplier default lead time for this variant's product"""
        return self.product.supplier.default_lead_days

    def __repr__(self):
        return f'<ProductVariant {self.sku}>'
