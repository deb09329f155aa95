"""External collaborator clients for hooks.

Each client implements one of the role protocols in
idhooks.collaborators.base, so hooks never depend on a specific vendor.

Exports:
    Contact: CRM contact record normalised across vendors.
    ContactDirectory, RiskScorer, IdentityVerifier, RiskProfileService,
    EventPublisher, Notifier, AuditSink: Role protocols.
    DeduceClient, HubSpotContacts, SalesforceContacts, ServiceNowContacts,
    DynamicsContacts, IdDataWebVerifier, SecZettaProfiles,
    EventBridgePublisher, SlackWebhook, SplunkCollector: Vendor clients.
"""

from idhooks.collaborators.base import (
    AuditSink,
    Contact,
    ContactDirectory,
    EventPublisher,
    IdentityVerifier,
    Notifier,
    RiskProfileService,
    RiskScorer,
)
from idhooks.collaborators.deduce import DeduceClient
from idhooks.collaborators.dynamics import DynamicsContacts
from idhooks.collaborators.eventbridge import EventBridgePublisher
from idhooks.collaborators.hubspot import HubSpotContacts
from idhooks.collaborators.iddataweb import IdDataWebVerifier
from idhooks.collaborators.salesforce import SalesforceContacts
from idhooks.collaborators.seczetta import SecZettaProfiles
from idhooks.collaborators.servicenow import ServiceNowContacts
from idhooks.collaborators.slack import SlackWebhook
from idhooks.collaborators.splunk import SplunkCollector


__all__ = [
    # Protocols
    "AuditSink",
    "Contact",
    "ContactDirectory",
    "EventPublisher",
    "IdentityVerifier",
    "Notifier",
    "RiskProfileService",
    "RiskScorer",
    # Clients
    "DeduceClient",
    "DynamicsContacts",
    "EventBridgePublisher",
    "HubSpotContacts",
    "IdDataWebVerifier",
    "SalesforceContacts",
    "SecZettaProfiles",
    "ServiceNowContacts",
    "SlackWebhook",
    "SplunkCollector",
]
