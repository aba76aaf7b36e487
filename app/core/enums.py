from enum import Enum


class ServiceLevel(str, Enum):
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"

    def __str__(self):
        return self.value


class BackfillOption(str, Enum):
    WITH = "with"
    WITHOUT = "without"

    def __str__(self):
        return self.value


class ContractDuration(str, Enum):
    SHORT_TERM = "short-term"
    LONG_TERM = "long-term"

    def __str__(self):
        return self.value


class VisitType(str, Enum):
    FULL_DAY = "full-day"
    HALF_DAY = "half-day"

    def __str__(self):
        return self.value


class DispatchPriority(str, Enum):
    INCIDENT_9X5X4 = "9x5x4 Incident Response"
    RESPONSE_24X7X4 = "24x7x4 Response to site"
    SAME_BUSINESS_DAY = "SBD Business Day Resolution to site"
    NEXT_BUSINESS_DAY = "NBD Resolution to site"
    TWO_BUSINESS_DAYS = "2BD Resolution to site"
    THREE_BUSINESS_DAYS = "3BD Resolution to site"

    def __str__(self):
        return self.value


class DispatchPricing(str, Enum):
    TWO_BUSINESS_DAYS = "2 BD Resolution to site"
    THREE_BUSINESS_DAYS = "3 BD Resolution to site"
    FOUR_BUSINESS_DAYS = "4 BD Resolution to site"

    def __str__(self):
        return self.value


class RateFile(str, Enum):
    BASE_L1 = "extracted_data L1.json"
    BASE_L2 = "extracted_data L2.json"
    BASE_L3 = "extracted_data L3.json"
    BASE_L4 = "extracted_data L4.json"
    BASE_L5 = "extracted_data L5.json"
    SHORT_TERM = "shorttermprojectrate.json"
    LONG_TERM = "longtermprojectrate.json"
    FULL_DAY_VISIT = "fulldayvisitrate.json"
    HALF_DAY_VISIT = "halfdayvisitrate.json"
    DISPATCH_TICKET = "dispatchticketprice.json"
    DISPATCH_EXTRA = "dispatchprice.json"

    def __str__(self):
        return self.value
