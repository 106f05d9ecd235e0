# catalog_search/models.py
"""Read model of the catalog. The indexer only reads these tables."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import relationship

from .db import Base

store_languages = Table(
    "store_languages",
    Base.metadata,
    Column("store_id", ForeignKey("merchant_stores.id"), primary_key=True),
    Column("language_id", ForeignKey("languages.id"), primary_key=True),
)

product_categories = Table(
    "product_categories",
    Base.metadata,
    Column("product_id", ForeignKey("products.id"), primary_key=True),
    Column("category_id", ForeignKey("categories.id"), primary_key=True),
)


class Language(Base):
    __tablename__ = "languages"

    id = Column(Integer, primary_key=True)
    code = Column(String(5), unique=True, nullable=False)


class MerchantStore(Base):
    __tablename__ = "merchant_stores"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), unique=True, nullable=False, index=True)
    currency = Column(String(3), nullable=False, default="USD")
    default_language_id = Column(ForeignKey("languages.id"), nullable=True)

    default_language = relationship(Language)
    languages = relationship(Language, secondary=store_languages, order_by=Language.id)


# ---------------------------------------------------------
# Manufacturers & categories
# ---------------------------------------------------------
class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False)

    descriptions = relationship("ManufacturerDescription", back_populates="manufacturer")


class ManufacturerDescription(Base):
    __tablename__ = "manufacturer_descriptions"

    id = Column(Integer, primary_key=True)
    manufacturer_id = Column(ForeignKey("manufacturers.id"), nullable=False)
    language_id = Column(ForeignKey("languages.id"), nullable=False)
    name = Column(String(255), nullable=False)

    manufacturer = relationship(Manufacturer, back_populates="descriptions")
    language = relationship(Language)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    descriptions = relationship("CategoryDescription", back_populates="category")


class CategoryDescription(Base):
    __tablename__ = "category_descriptions"

    id = Column(Integer, primary_key=True)
    category_id = Column(ForeignKey("categories.id"), nullable=False)
    language_id = Column(ForeignKey("languages.id"), nullable=False)
    name = Column(String(255), nullable=False)

    category = relationship(Category, back_populates="descriptions")
    language = relationship(Language)


# ---------------------------------------------------------
# Options, option values & variations
# ---------------------------------------------------------
class ProductOption(Base):
    __tablename__ = "product_options"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False)

    descriptions = relationship("ProductOptionDescription", back_populates="option")


class ProductOptionDescription(Base):
    __tablename__ = "product_option_descriptions"

    id = Column(Integer, primary_key=True)
    option_id = Column(ForeignKey("product_options.id"), nullable=False)
    language_id = Column(ForeignKey("languages.id"), nullable=False)
    name = Column(String(255), nullable=False)

    option = relationship(ProductOption, back_populates="descriptions")
    language = relationship(Language)


class ProductOptionValue(Base):
    __tablename__ = "product_option_values"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False)

    descriptions = relationship("ProductOptionValueDescription", back_populates="option_value")


class ProductOptionValueDescription(Base):
    __tablename__ = "product_option_value_descriptions"

    id = Column(Integer, primary_key=True)
    option_value_id = Column(ForeignKey("product_option_values.id"), nullable=False)
    language_id = Column(ForeignKey("languages.id"), nullable=False)
    name = Column(String(255), nullable=False)

    option_value = relationship(ProductOptionValue, back_populates="descriptions")
    language = relationship(Language)


class ProductVariation(Base):
    """One option/value selection, e.g. color=red."""
    __tablename__ = "product_variations"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=True)
    option_id = Column(ForeignKey("product_options.id"), nullable=False)
    option_value_id = Column(ForeignKey("product_option_values.id"), nullable=False)

    option = relationship(ProductOption)
    option_value = relationship(ProductOptionValue)


# ---------------------------------------------------------
# Products
# ---------------------------------------------------------
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    sku = Column(String(100), nullable=False, index=True)
    store_id = Column(ForeignKey("merchant_stores.id"), nullable=False)
    manufacturer_id = Column(ForeignKey("manufacturers.id"), nullable=True)

    # Pricing & stock
    price = Column(Numeric(12, 2), nullable=True)
    special_price = Column(Numeric(12, 2), nullable=True)
    special_from = Column(Date, nullable=True)
    special_to = Column(Date, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)

    review_average = Column(Numeric(3, 2), nullable=True)

    store = relationship(MerchantStore)
    manufacturer = relationship(Manufacturer)
    descriptions = relationship("ProductDescription", back_populates="product",
                                order_by="ProductDescription.id")
    attributes = relationship("ProductAttribute", back_populates="product",
                              order_by="ProductAttribute.id")
    variants = relationship("ProductVariant", back_populates="product",
                            order_by="ProductVariant.id")
    images = relationship("ProductImage", back_populates="product",
                          order_by="ProductImage.id")
    categories = relationship(Category, secondary=product_categories)


class ProductDescription(Base):
    __tablename__ = "product_descriptions"

    id = Column(Integer, primary_key=True)
    product_id = Column(ForeignKey("products.id"), nullable=False)
    language_id = Column(ForeignKey("languages.id"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)    # may contain HTML
    seo_url = Column(String(255), nullable=True)

    product = relationship(Product, back_populates="descriptions")
    language = relationship(Language)


class ProductAttribute(Base):
    __tablename__ = "product_attributes"

    id = Column(Integer, primary_key=True)
    product_id = Column(ForeignKey("products.id"), nullable=False)
    option_id = Column(ForeignKey("product_options.id"), nullable=False)
    option_value_id = Column(ForeignKey("product_option_values.id"), nullable=False)

    product = relationship(Product, back_populates="attributes")
    option = relationship(ProductOption)
    option_value = relationship(ProductOptionValue)


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(ForeignKey("products.id"), nullable=False)
    sku = Column(String(100), nullable=True)
    variation_id = Column(ForeignKey("product_variations.id"), nullable=True)
    variation_value_id = Column(ForeignKey("product_variations.id"), nullable=True)

    # Own pricing is optional; the parent product's applies otherwise
    price = Column(Numeric(12, 2), nullable=True)
    special_price = Column(Numeric(12, 2), nullable=True)
    special_from = Column(Date, nullable=True)
    special_to = Column(Date, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)

    product = relationship(Product, back_populates="variants")
    variation = relationship(ProductVariation, foreign_keys=[variation_id])
    variation_value = relationship(ProductVariation, foreign_keys=[variation_value_id])


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(ForeignKey("products.id"), nullable=False)
    image_name = Column(String(255), nullable=False)
    default_image = Column(Boolean, nullable=False, default=False)

    product = relationship(Product, back_populates="images")
