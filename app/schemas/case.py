from typing import List, Literal, Optional
from datetime import date, datetime
from pydantic import Field, field_validator
from app.db.models.case import CasePriority, CaseStatus
from app.schemas.base import BaseSchema, CamelModel, OptionalDate, OptionalText, reject_null
from app.schemas.user import UserSummary

class InitialAssessmentFields(CamelModel):
    claim_reference: OptionalText = None
    full_name: OptionalText = None
    address: OptionalText = None
    post_code: OptionalText = None
    date_moved_in: OptionalDate = None
    date_of_birth: OptionalDate = None
    ni_number: OptionalText = None
    dl_number: OptionalText = None
    dl_issue: OptionalDate = None
    dl_expiry: OptionalDate = None
    claimant_contact_number: OptionalText = None
    email_address: OptionalText = None
    occupation: OptionalText = None
    lived_in_current_address_3_years: OptionalText = None
    address_2: OptionalText = None
    address_2_dates: OptionalText = None
    address_3: OptionalText = None
    address_3_dates: OptionalText = None
    uk_resident_from_birth: OptionalText = None
    uk_resident_since: OptionalDate = None
    accident_location: OptionalText = None
    accident_circumstances: OptionalText = None
    date_of_accident: OptionalDate = None
    time_of_accident: OptionalText = None
    defendant_name: OptionalText = None
    defendant_reg: OptionalText = None
    defendant_contact_number: OptionalText = None
    defendant_make_model_color: OptionalText = None
    claimant_vehicle_registration: OptionalText = None
    claimant_insurer: OptionalText = None
    claimant_make_model: OptionalText = None
    main_policy_holder: OptionalText = None
    additional_driver_1: OptionalText = None
    additional_driver_2: OptionalText = None
    additional_driver_3: OptionalText = None
    insurance_type: OptionalText = None
    no_claims_bonus: OptionalText = None
    date_licence_obtained: OptionalDate = None
    claimant_claiming_injury: OptionalText = None
    vehicle_valid_mot_and_tax: OptionalText = Field(None, alias="vehicleValidMOTAndTax")
    ever_declared_bankrupt: OptionalText = None
    access_to_other_vehicles: OptionalText = None
    own_the_vehicle: OptionalText = None
    vehicle_owner_relationship: OptionalText = None
    car_on_finance: OptionalText = None
    work_in_motor_trade: OptionalText = None
    need_for_prestige_vehicle: OptionalText = None
    private_hire_licence_years: OptionalText = None
    taxi_income_percent: OptionalText = None
    additional_employment: OptionalText = None
    witness_name: OptionalText = None
    witness_contact_number: OptionalText = None
    witness_relation_to_claimant: OptionalText = None
    witness_details_obtained: OptionalText = None
    witness_additional_information: OptionalText = None
    non_standard_driver: Optional[bool] = None
    aged_between_25_and_70: Optional[bool] = None
    full_uk_or_eu_driving_license_2_years: Optional[bool] = Field(None, alias="fullUKOrEUDrivingLicense2Years")
    taxi_licence_1_year: Optional[bool] = None
    uk_resident_3_years: Optional[bool] = None
    no_more_than_9_penalty_points: Optional[bool] = None
    not_banned_from_driving_5_years: Optional[bool] = None
    no_more_than_1_fault_claim_2_years: Optional[bool] = None
    no_non_spent_criminal_convictions: Optional[bool] = None
    no_disability_or_medical_condition: Optional[bool] = None
    additional_information: OptionalText = None

class CaseCreate(InitialAssessmentFields):
    """
    New case plus its initial assessment. Any status sent by the caller is
    ignored; cases always open at the first step.
    """
    title: str = Field(..., min_length=1)
    client: str = Field(..., min_length=1)
    priority: CasePriority
    assigned_to: OptionalText = None

class CaseUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    client: Optional[str] = Field(None, min_length=1)
    priority: Optional[CasePriority] = None
    status: Optional[CaseStatus] = None
    assigned_to: OptionalText = None

    @field_validator("title", "client", "priority", "status")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

class CaseStatusChange(CamelModel):
    direction: Literal["next", "previous"]

class InitialAssessment(InitialAssessmentFields):
    id: str
    case_id: str
    created_at: datetime

class Case(BaseSchema):
    case_id: str
    title: str
    client: str
    status: CaseStatus
    priority: CasePriority
    assigned_to: Optional[str] = None
    created_by: str

class CaseResponse(Case):
    assigned_to_user: Optional[UserSummary] = None
    created_by_user: Optional[UserSummary] = None

class CaseDetail(CaseResponse):
    initial_assessments: List[InitialAssessment] = []
