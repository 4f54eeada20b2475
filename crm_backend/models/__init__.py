# Models package - normalized database models
from crm_backend.models.user import User
from crm_backend.models.customer_list import CustomerList
from crm_backend.models.customer import Customer, CustomerStatus
from crm_backend.models.campaign import Campaign, CampaignStatus, CampaignCustomerList, CampaignCustomer
from crm_backend.models.activity import Activity, Activities
