from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from enum import Enum
from app.db.base_class import Base, generate_id, utcnow

class CaseStatus(str, Enum):
    INITIAL_ASSESSMENT = "INITIAL_ASSESSMENT"
    ACCIDENT_IMAGES = "ACCIDENT_IMAGES"
    CLIENT_ID_PROOF_OF_ADDRESS = "CLIENT_ID_PROOF_OF_ADDRESS"
    CLIENT_VEHICLE_DOCUMENTS = "CLIENT_VEHICLE_DOCUMENTS"
    AUTHORISATION_MITIGATION_STATEMENT = "AUTHORISATION_MITIGATION_STATEMENT"
    ISAGI_CHECK = "ISAGI_CHECK"
    THREE_MONTHS_BANK_STATEMENTS = "THREE_MONTHS_BANK_STATEMENTS"
    ASKMID_SEARCH = "ASKMID_SEARCH"
    DVLA_LICENCE_CHECK = "DVLA_LICENCE_CHECK"
    HIRE_VEHICLE_DOCUMENTS = "HIRE_VEHICLE_DOCUMENTS"
    HSR_AGREEMENTS = "HSR_AGREEMENTS"
    PERMISSION_LETTER = "PERMISSION_LETTER"
    STRIPE_DETAILS = "STRIPE_DETAILS"
    DAMAGE_CHECKLIST = "DAMAGE_CHECKLIST"
    CLIENT_QUESTIONNAIRES = "CLIENT_QUESTIONNAIRES"
    OFFBOARDING = "OFFBOARDING"
    BHR_REPORT = "BHR_REPORT"
    CANFORD_LAW_SETUP = "CANFORD_LAW_SETUP"
    NON_CO_OPERATIVE_CLIENT = "NON_CO_OPERATIVE_CLIENT"

class CasePriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

class Case(Base):
    __tablename__ = "cases"

    id = Column(String(36), primary_key=True, default=generate_id)
    # Human-readable sequence number, "C-1", "C-2", ...
    case_id = Column(String(32), nullable=False, unique=True, index=True)
    title = Column(Text, nullable=False)
    client = Column(Text, nullable=False)
    status = Column(SQLEnum(CaseStatus, name="case_status"), nullable=False,
                    default=CaseStatus.INITIAL_ASSESSMENT)
    priority = Column(SQLEnum(CasePriority, name="case_priority"), nullable=False,
                      default=CasePriority.MEDIUM)
    assigned_to = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    assigned_to_user = relationship("User", foreign_keys=[assigned_to])
    created_by_user = relationship("User", foreign_keys=[created_by])
    initial_assessments = relationship(
        "InitialAssessment",
        back_populates="case",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InitialAssessment.created_at.desc()",
    )

class InitialAssessment(Base):
    """Claimant intake captured when a case is opened."""
    __tablename__ = "initial_assessments"

    id = Column(String(36), primary_key=True, default=generate_id)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)

    # Claimant
    claim_reference = Column(Text, nullable=True)
    full_name = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    post_code = Column(Text, nullable=True)
    date_moved_in = Column(Date, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    ni_number = Column(Text, nullable=True)
    dl_number = Column(Text, nullable=True)
    dl_issue = Column(Date, nullable=True)
    dl_expiry = Column(Date, nullable=True)
    claimant_contact_number = Column(Text, nullable=True)
    email_address = Column(Text, nullable=True)
    occupation = Column(Text, nullable=True)

    # Address history
    lived_in_current_address_3_years = Column(Text, nullable=True)
    address_2 = Column(Text, nullable=True)
    address_2_dates = Column(Text, nullable=True)
    address_3 = Column(Text, nullable=True)
    address_3_dates = Column(Text, nullable=True)
    uk_resident_from_birth = Column(Text, nullable=True)
    uk_resident_since = Column(Date, nullable=True)

    # Accident
    accident_location = Column(Text, nullable=True)
    accident_circumstances = Column(Text, nullable=True)
    date_of_accident = Column(Date, nullable=True)
    time_of_accident = Column(Text, nullable=True)  # HH:mm

    # Defendant
    defendant_name = Column(Text, nullable=True)
    defendant_reg = Column(Text, nullable=True)
    defendant_contact_number = Column(Text, nullable=True)
    defendant_make_model_color = Column(Text, nullable=True)

    # Claimant vehicle and insurance
    claimant_vehicle_registration = Column(Text, nullable=True)
    claimant_insurer = Column(Text, nullable=True)
    claimant_make_model = Column(Text, nullable=True)
    main_policy_holder = Column(Text, nullable=True)
    additional_driver_1 = Column(Text, nullable=True)
    additional_driver_2 = Column(Text, nullable=True)
    additional_driver_3 = Column(Text, nullable=True)
    insurance_type = Column(Text, nullable=True)
    no_claims_bonus = Column(Text, nullable=True)
    date_licence_obtained = Column(Date, nullable=True)
    claimant_claiming_injury = Column(Text, nullable=True)
    vehicle_valid_mot_and_tax = Column(Text, nullable=True)
    ever_declared_bankrupt = Column(Text, nullable=True)

    # Vehicle access and employment
    access_to_other_vehicles = Column(Text, nullable=True)
    own_the_vehicle = Column(Text, nullable=True)
    vehicle_owner_relationship = Column(Text, nullable=True)
    car_on_finance = Column(Text, nullable=True)
    work_in_motor_trade = Column(Text, nullable=True)
    need_for_prestige_vehicle = Column(Text, nullable=True)
    private_hire_licence_years = Column(Text, nullable=True)
    taxi_income_percent = Column(Text, nullable=True)
    additional_employment = Column(Text, nullable=True)

    # Witness
    witness_name = Column(Text, nullable=True)
    witness_contact_number = Column(Text, nullable=True)
    witness_relation_to_claimant = Column(Text, nullable=True)
    witness_details_obtained = Column(Text, nullable=True)
    witness_additional_information = Column(Text, nullable=True)

    # Eligibility
    non_standard_driver = Column(Boolean, nullable=True)
    aged_between_25_and_70 = Column(Boolean, nullable=True)
    full_uk_or_eu_driving_license_2_years = Column(Boolean, nullable=True)
    taxi_licence_1_year = Column(Boolean, nullable=True)
    uk_resident_3_years = Column(Boolean, nullable=True)
    no_more_than_9_penalty_points = Column(Boolean, nullable=True)
    not_banned_from_driving_5_years = Column(Boolean, nullable=True)
    no_more_than_1_fault_claim_2_years = Column(Boolean, nullable=True)
    no_non_spent_criminal_convictions = Column(Boolean, nullable=True)
    no_disability_or_medical_condition = Column(Boolean, nullable=True)

    additional_information = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    case = relationship("Case", back_populates="initial_assessments")
