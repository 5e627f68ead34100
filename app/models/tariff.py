from sqlalchemy import Column, String, Float, Date
from app.database import Base

class Tariff(Base):
    __tablename__ = "tbeeg_tariffs"

    # Partition key (energy source) + category code identify a category
    trf_energy_source =         Column(String(100), primary_key=True)
    trf_category_code =         Column(String(50), primary_key=True)
    trf_designation =           Column(String(255), nullable=False)
    trf_period_text =           Column(String(255), nullable=True)
    trf_criteria_text =         Column(String(500), nullable=True)
    trf_allocation =            Column(String(100), nullable=True)
    trf_date_from =             Column(Date, nullable=True, index=True)
    trf_date_to =               Column(Date, nullable=True)
    trf_power_from_kw =         Column(Float, nullable=True)
    trf_power_to_kw =           Column(Float, nullable=True)
    trf_feed_in_ct_kwh =        Column(Float, nullable=True)
    trf_reference_ct_kwh =      Column(Float, nullable=True)
    trf_fallback_ct_kwh =       Column(Float, nullable=True)
    trf_tenant_power_ct_kwh =   Column(Float, nullable=True)
    trf_added_date =            Column(String(50), nullable=True)
