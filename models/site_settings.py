"""
Single-row configuration tables and the early-access signup list.

SiteSettings and StorageSettings always hold exactly one row (id SINGLETON_ID);
get_or_create_* seeds it on first use.
"""
from sqlalchemy import Column, String, DateTime, JSON

from models.base_model import BaseModel, Base

SINGLETON_ID = "1"

DEFAULT_SITE_SETTINGS = {
    "brand_name": "sold.bd",
    "brand_tagline": "Bangladesh's Flash Deals Marketplace",
    "header_kicker": "Live drops • Limited stock",
    "hero_h1": "Get it Before it's Sold — Bangladesh's Flash Deals Marketplace",
    "hero_subtitle": "Limited-stock drops from local sellers. Miss it, it's gone forever.",
    "whatsapp_phone_e164": "+8801700000000",
    "whatsapp_default_message": "Hi sold.bd! I want early access and updates about upcoming flash drops.",
}


class SiteSettings(BaseModel, Base):
    __tablename__ = "site_settings"

    brand_name = Column(String(60), nullable=False)
    brand_tagline = Column(String(120), nullable=False)
    header_kicker = Column(String(80), nullable=False)
    hero_h1 = Column(String(200), nullable=False)
    hero_subtitle = Column(String(240), nullable=False)
    whatsapp_phone_e164 = Column(String(32), nullable=False)
    whatsapp_default_message = Column(String(500), nullable=False)
    next_drop_at = Column(DateTime, nullable=True)
    content = Column(JSON, nullable=False, default=dict)


class EarlyAccessSignup(BaseModel, Base):
    __tablename__ = "early_access_signups"

    email = Column(String(255), nullable=False, unique=True, index=True)


class StorageSettings(BaseModel, Base):
    __tablename__ = "external_storage_settings"

    provider = Column(String(32), nullable=True)
    settings = Column(JSON, nullable=True)


def get_or_create_site_settings(session):
    row = session.get(SiteSettings, SINGLETON_ID)
    if row is None:
        row = SiteSettings(id=SINGLETON_ID, content={}, **DEFAULT_SITE_SETTINGS)
        session.add(row)
        session.flush()
    return row


def get_or_create_storage_settings(session):
    row = session.get(StorageSettings, SINGLETON_ID)
    if row is None:
        row = StorageSettings(id=SINGLETON_ID, provider=None, settings=None)
        session.add(row)
        session.flush()
    return row
