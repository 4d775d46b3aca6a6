"""
Parameter-order registry for the supported Plaid operations.

Plaid client methods take ordered parameters while callers send a bag of
named values. The registry records, per operation, the order in which those
names must be bound. The set of operations is closed: a name that is not an
Operation member is not supported.
"""

from enum import Enum
from typing import Dict, Optional

from plaid_proxy.models.operation import OperationDescriptor


class Operation(str, Enum):
    """Supported operations, valued by the name callers use."""
    CREATE_ASSET_REPORT = 'createAssetReport'
    CREATE_DEPOSIT_SWITCH = 'createDepositSwitch'
    CREATE_DEPOSIT_SWITCH_TOKEN = 'createDepositSwitchToken'
    CREATE_ITEM_ADD_TOKEN = 'createItemAddToken'
    CREATE_PAYMENT = 'createPayment'
    CREATE_PAYMENT_RECIPIENT = 'createPaymentRecipient'
    CREATE_PAYMENT_TOKEN = 'createPaymentToken'
    CREATE_PROCESSOR_TOKEN = 'createProcessorToken'
    CREATE_PUBLIC_TOKEN = 'createPublicToken'
    CREATE_STRIPE_TOKEN = 'createStripeToken'
    DELETE_ITEM = 'deleteItem'
    EXCHANGE_PUBLIC_TOKEN = 'exchangePublicToken'
    FILTER_ASSET_REPORT = 'filterAssetReport'
    GET_ACCOUNTS = 'getAccounts'
    GET_ALL_TRANSACTIONS = 'getAllTransactions'
    GET_ASSET_REPORT = 'getAssetReport'
    GET_ASSET_REPORT_PDF = 'getAssetReportPdf'
    GET_AUDIT_COPY = 'getAuditCopy'
    GET_AUTH = 'getAuth'
    GET_BALANCE = 'getBalance'
    GET_CATEGORIES = 'getCategories'
    GET_CREDIT_DETAILS = 'getCreditDetails'
    GET_DEPOSIT_SWITCH = 'getDepositSwitch'
    GET_HOLDINGS = 'getHoldings'
    GET_INCOME = 'getIncome'
    GET_INSTITUTION_BY_ID = 'getInstitutionById'
    GET_INSTITUTIONS = 'getInstitutions'
    GET_INVESTMENT_TRANSACTIONS = 'getInvestmentTransactions'
    GET_ITEM = 'getItem'
    GET_LIABILITIES = 'getLiabilities'
    GET_PAYMENT = 'getPayment'
    GET_PAYMENT_RECIPIENT = 'getPaymentRecipient'
    GET_TRANSACTIONS = 'getTransactions'
    GET_WEBHOOK_VERIFICATION_KEY = 'getWebhookVerificationKey'
    IMPORT_ITEM = 'importItem'
    INVALIDATE_ACCESS_TOKEN = 'invalidateAccessToken'
    LIST_PAYMENT_RECIPIENTS = 'listPaymentRecipients'
    REFRESH_ASSET_REPORT = 'refreshAssetReport'
    REFRESH_TRANSACTIONS = 'refreshTransactions'
    REMOVE_ASSET_REPORT = 'removeAssetReport'
    REMOVE_AUDIT_COPY = 'removeAuditCopy'
    REMOVE_ITEM = 'removeItem'
    RESET_LOGIN = 'resetLogin'
    SANDBOX_ITEM_FIRE_WEBHOOK = 'sandboxItemFireWebhook'
    SANDBOX_ITEM_SET_VERIFICATION_STATUS = 'sandboxItemSetVerificationStatus'
    SANDBOX_PUBLIC_TOKEN_CREATE = 'sandboxPublicTokenCreate'
    SEARCH_INSTITUTIONS_BY_NAME = 'searchInstitutionsByName'
    UPDATE_ITEM_WEBHOOK = 'updateItemWebhook'


_PARAMETER_ORDERS: Dict[Operation, tuple[str, ...]] = {
    Operation.CREATE_ASSET_REPORT: ('accessTokens', 'daysRequested', 'options'),
    Operation.CREATE_DEPOSIT_SWITCH: ('targetAccountId', 'targetAccessToken', 'options'),
    Operation.CREATE_DEPOSIT_SWITCH_TOKEN: ('depositSwitchId', 'options'),
    Operation.CREATE_ITEM_ADD_TOKEN: ('options',),
    Operation.CREATE_PAYMENT: ('recipientId', 'reference', 'amount'),
    Operation.CREATE_PAYMENT_RECIPIENT: ('name', 'iban', 'address'),
    Operation.CREATE_PAYMENT_TOKEN: ('paymentId',),
    Operation.CREATE_PROCESSOR_TOKEN: ('accessToken', 'accountId', 'processor'),
    Operation.CREATE_PUBLIC_TOKEN: ('accessToken',),
    Operation.CREATE_STRIPE_TOKEN: ('accessToken', 'accountId'),
    Operation.DELETE_ITEM: ('accessToken',),
    Operation.EXCHANGE_PUBLIC_TOKEN: ('publicToken',),
    Operation.FILTER_ASSET_REPORT: ('assetReportToken', 'accountIdsToExclude'),
    Operation.GET_ACCOUNTS: ('accessToken', 'options'),
    Operation.GET_ALL_TRANSACTIONS: ('accessToken', 'startDate', 'endDate', 'options'),
    Operation.GET_ASSET_REPORT: ('assetReportToken', 'includeInsights'),
    Operation.GET_ASSET_REPORT_PDF: ('assetReportToken',),
    Operation.GET_AUDIT_COPY: ('auditCopyToken',),
    Operation.GET_AUTH: ('accessToken', 'options'),
    Operation.GET_BALANCE: ('accessToken', 'options'),
    Operation.GET_CATEGORIES: (),
    Operation.GET_CREDIT_DETAILS: ('accessToken',),
    Operation.GET_DEPOSIT_SWITCH: ('depositSwitchId', 'options'),
    Operation.GET_HOLDINGS: ('accessToken',),
    Operation.GET_INCOME: ('accessToken',),
    Operation.GET_INSTITUTION_BY_ID: ('institutionId', 'options'),
    Operation.GET_INSTITUTIONS: ('count', 'offset', 'options'),
    Operation.GET_INVESTMENT_TRANSACTIONS: ('accessToken', 'startDate', 'endDate', 'options'),
    Operation.GET_ITEM: ('accessToken',),
    Operation.GET_LIABILITIES: ('accessToken', 'options'),
    Operation.GET_PAYMENT: ('paymentId',),
    Operation.GET_PAYMENT_RECIPIENT: ('recipientId',),
    Operation.GET_TRANSACTIONS: ('accessToken', 'startDate', 'endDate', 'options'),
    Operation.GET_WEBHOOK_VERIFICATION_KEY: ('keyId',),
    Operation.IMPORT_ITEM: ('products', 'userAuth', 'options'),
    Operation.INVALIDATE_ACCESS_TOKEN: ('accessToken',),
    Operation.LIST_PAYMENT_RECIPIENTS: (),
    Operation.REFRESH_ASSET_REPORT: ('assetReportToken', 'daysRequested', 'options'),
    Operation.REFRESH_TRANSACTIONS: ('accessToken',),
    Operation.REMOVE_ASSET_REPORT: ('assetReportToken',),
    Operation.REMOVE_AUDIT_COPY: ('auditCopyToken',),
    Operation.REMOVE_ITEM: ('accessToken',),
    Operation.RESET_LOGIN: ('accessToken',),
    Operation.SANDBOX_ITEM_FIRE_WEBHOOK: ('accessToken', 'webhookCode'),
    Operation.SANDBOX_ITEM_SET_VERIFICATION_STATUS: ('accessToken', 'accountId', 'verificationStatus'),
    Operation.SANDBOX_PUBLIC_TOKEN_CREATE: ('institutionId', 'initialProducts', 'options'),
    Operation.SEARCH_INSTITUTIONS_BY_NAME: ('query', 'products', 'options'),
    Operation.UPDATE_ITEM_WEBHOOK: ('accessToken', 'webhook'),
}

REGISTRY: Dict[Operation, OperationDescriptor] = {
    operation: OperationDescriptor(name=operation.value, parameter_order=parameter_order)
    for operation, parameter_order in _PARAMETER_ORDERS.items()
}


def resolve_operation(name: Optional[str]) -> Optional[Operation]:
    """Return the Operation called `name`, or None when it is not supported."""
    if not name:
        return None
    try:
        return Operation(name)
    except ValueError:
        return None


def lookup(name: Optional[str]) -> Optional[OperationDescriptor]:
    """
    Look up the descriptor of an operation by name.

    Args:
        name: Operation name as sent by the caller

    Returns:
        The operation's descriptor, or None when the operation is not supported
    """
    operation = resolve_operation(name)
    if operation is None:
        return None
    return REGISTRY[operation]
