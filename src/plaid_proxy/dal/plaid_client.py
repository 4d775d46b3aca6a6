"""
Plaid API client used as the proxy's upstream.

The client exposes one method per supported operation with the ordered
parameter signature the dispatch layer binds against. Each method posts a
JSON request to the matching Plaid endpoint; error responses are raised as
PlaidError carrying Plaid's error fields.
"""

import base64
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx

from plaid_proxy.handlers.utils.observability import logger, tracer
from plaid_proxy.logic.registry import Operation


class PlaidEnvironment(str, Enum):
    """Plaid environments selectable through configuration."""
    SANDBOX = 'sandbox'
    DEVELOPMENT = 'development'
    PRODUCTION = 'production'


PLAID_BASE_URLS: Dict[PlaidEnvironment, str] = {
    PlaidEnvironment.SANDBOX: 'https://sandbox.plaid.com',
    PlaidEnvironment.DEVELOPMENT: 'https://development.plaid.com',
    PlaidEnvironment.PRODUCTION: 'https://production.plaid.com',
}

# Page size used when collecting every transaction in a date range
TRANSACTIONS_PAGE_SIZE = 500


class PlaidError(Exception):
    """Raised when Plaid answers a request with an error payload."""

    def __init__(
        self,
        error_message: Optional[str] = None,
        error_code: Optional[str] = None,
        error_type: Optional[str] = None,
        display_message: Optional[str] = None,
        request_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(error_message or f"Plaid request failed with status {status_code}")
        self.error_message = error_message
        self.error_code = error_code
        self.error_type = error_type
        self.display_message = display_message
        self.request_id = request_id
        self.status_code = status_code

    @classmethod
    def from_response(cls, response: httpx.Response) -> 'PlaidError':
        """Build an error from a non-2xx Plaid response."""
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        return cls(
            error_message=payload.get('error_message'),
            error_code=payload.get('error_code'),
            error_type=payload.get('error_type'),
            display_message=payload.get('display_message'),
            request_id=payload.get('request_id'),
            status_code=response.status_code,
        )


class PlaidClient:
    """HTTP client for the Plaid API with ordered-parameter operations."""

    def __init__(
        self,
        client_id: str,
        secret: str,
        environment: PlaidEnvironment = PlaidEnvironment.SANDBOX,
        public_key: str = '',
        api_version: str = '2020-09-14',
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the Plaid client.

        Args:
            client_id: Plaid client identifier
            secret: Plaid secret for the selected environment
            environment: Environment selecting the upstream base URL
            public_key: Legacy public key, used by institution lookups when set
            api_version: Value of the Plaid-Version header
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.client_id = client_id
        self.secret = secret
        self.public_key = public_key
        self.environment = PlaidEnvironment(environment)
        self.http = httpx.Client(
            base_url=PLAID_BASE_URLS[self.environment],
            timeout=timeout,
            headers={'Plaid-Version': api_version},
            transport=transport,
        )
        logger.debug(f'Plaid client initialized for environment: {self.environment.value}')

    def close(self) -> None:
        self.http.close()

    def _credentials(self) -> Dict[str, str]:
        return {'client_id': self.client_id, 'secret': self.secret}

    def _public_credentials(self) -> Dict[str, str]:
        if self.public_key:
            return {'public_key': self.public_key}
        return self._credentials()

    def _request(self, path: str, body: Dict[str, Any], credentials: Optional[Dict[str, str]]) -> httpx.Response:
        payload = {key: value for key, value in body.items() if value is not None}
        if credentials:
            payload.update(credentials)

        logger.debug(f'Calling Plaid endpoint: {path}')
        tracer.put_annotation('plaid_endpoint', path)

        response = self.http.post(path, json=payload)
        if response.is_error:
            error = PlaidError.from_response(response)
            logger.warning(f'Plaid endpoint {path} returned an error', extra={
                'status_code': response.status_code,
                'error_code': error.error_code,
                'error_type': error.error_type,
                'plaid_request_id': error.request_id,
            })
            raise error
        return response

    def _post(self, path: str, body: Dict[str, Any], credentials: Optional[Dict[str, str]] = None) -> Any:
        """Post a JSON request with client credentials unless others are given."""
        if credentials is None:
            credentials = self._credentials()
        return self._request(path, body, credentials).json()

    # Assets

    @tracer.capture_method
    def create_asset_report(self, access_tokens: List[str], days_requested: int, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/asset_report/create', {
            'access_tokens': access_tokens,
            'days_requested': days_requested,
            'options': options,
        })

    @tracer.capture_method
    def filter_asset_report(self, asset_report_token: str, account_ids_to_exclude: List[str]) -> Any:
        return self._post('/asset_report/filter', {
            'asset_report_token': asset_report_token,
            'account_ids_to_exclude': account_ids_to_exclude,
        })

    @tracer.capture_method
    def get_asset_report(self, asset_report_token: str, include_insights: Optional[bool] = None) -> Any:
        return self._post('/asset_report/get', {
            'asset_report_token': asset_report_token,
            'include_insights': include_insights,
        })

    @tracer.capture_method
    def get_asset_report_pdf(self, asset_report_token: str) -> str:
        """
        Fetch an asset report as PDF.

        Returns:
            The PDF document encoded as base64, so it can travel in a JSON body
        """
        response = self._request(
            '/asset_report/pdf/get',
            {'asset_report_token': asset_report_token},
            self._credentials(),
        )
        return base64.b64encode(response.content).decode('ascii')

    @tracer.capture_method
    def refresh_asset_report(self, asset_report_token: str, days_requested: Optional[int] = None, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/asset_report/refresh', {
            'asset_report_token': asset_report_token,
            'days_requested': days_requested,
            'options': options,
        })

    @tracer.capture_method
    def remove_asset_report(self, asset_report_token: str) -> Any:
        return self._post('/asset_report/remove', {'asset_report_token': asset_report_token})

    @tracer.capture_method
    def get_audit_copy(self, audit_copy_token: str) -> Any:
        return self._post('/asset_report/audit_copy/get', {'audit_copy_token': audit_copy_token})

    @tracer.capture_method
    def remove_audit_copy(self, audit_copy_token: str) -> Any:
        return self._post('/asset_report/audit_copy/remove', {'audit_copy_token': audit_copy_token})

    # Deposit switch

    @tracer.capture_method
    def create_deposit_switch(self, target_account_id: str, target_access_token: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/deposit_switch/create', {
            'target_account_id': target_account_id,
            'target_access_token': target_access_token,
            'options': options,
        })

    @tracer.capture_method
    def create_deposit_switch_token(self, deposit_switch_id: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/deposit_switch/token/create', {
            'deposit_switch_id': deposit_switch_id,
            'options': options,
        })

    @tracer.capture_method
    def get_deposit_switch(self, deposit_switch_id: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/deposit_switch/get', {
            'deposit_switch_id': deposit_switch_id,
            'options': options,
        })

    # Items and tokens

    @tracer.capture_method
    def create_item_add_token(self, options: Optional[Dict[str, Any]] = None) -> Any:
        # This endpoint takes the options at the top level of the request
        return self._post('/item/add_token/create', dict(options or {}))

    @tracer.capture_method
    def create_public_token(self, access_token: str) -> Any:
        return self._post('/item/public_token/create', {'access_token': access_token})

    @tracer.capture_method
    def exchange_public_token(self, public_token: str) -> Any:
        return self._post('/item/public_token/exchange', {'public_token': public_token})

    @tracer.capture_method
    def invalidate_access_token(self, access_token: str) -> Any:
        return self._post('/item/access_token/invalidate', {'access_token': access_token})

    @tracer.capture_method
    def get_item(self, access_token: str) -> Any:
        return self._post('/item/get', {'access_token': access_token})

    @tracer.capture_method
    def remove_item(self, access_token: str) -> Any:
        return self._post('/item/remove', {'access_token': access_token})

    @tracer.capture_method
    def delete_item(self, access_token: str) -> Any:
        """Deprecated alias kept for callers of the old item deletion endpoint."""
        return self._post('/item/delete', {'access_token': access_token})

    @tracer.capture_method
    def import_item(self, products: List[str], user_auth: Dict[str, Any], options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/item/import', {
            'products': products,
            'user_auth': user_auth,
            'options': options,
        })

    @tracer.capture_method
    def update_item_webhook(self, access_token: str, webhook: str) -> Any:
        return self._post('/item/webhook/update', {
            'access_token': access_token,
            'webhook': webhook,
        })

    @tracer.capture_method
    def get_webhook_verification_key(self, key_id: str) -> Any:
        return self._post('/webhook_verification_key/get', {'key_id': key_id})

    # Processor tokens

    @tracer.capture_method
    def create_processor_token(self, access_token: str, account_id: str, processor: str) -> Any:
        return self._post('/processor/token/create', {
            'access_token': access_token,
            'account_id': account_id,
            'processor': processor,
        })

    @tracer.capture_method
    def create_stripe_token(self, access_token: str, account_id: str) -> Any:
        return self._post('/processor/stripe/bank_account_token/create', {
            'access_token': access_token,
            'account_id': account_id,
        })

    # Payment initiation

    @tracer.capture_method
    def create_payment(self, recipient_id: str, reference: str, amount: Dict[str, Any]) -> Any:
        return self._post('/payment_initiation/payment/create', {
            'recipient_id': recipient_id,
            'reference': reference,
            'amount': amount,
        })

    @tracer.capture_method
    def create_payment_recipient(self, name: str, iban: Optional[str] = None, address: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/payment_initiation/recipient/create', {
            'name': name,
            'iban': iban,
            'address': address,
        })

    @tracer.capture_method
    def create_payment_token(self, payment_id: str) -> Any:
        return self._post('/payment_initiation/payment/token/create', {'payment_id': payment_id})

    @tracer.capture_method
    def get_payment(self, payment_id: str) -> Any:
        return self._post('/payment_initiation/payment/get', {'payment_id': payment_id})

    @tracer.capture_method
    def get_payment_recipient(self, recipient_id: str) -> Any:
        return self._post('/payment_initiation/recipient/get', {'recipient_id': recipient_id})

    @tracer.capture_method
    def list_payment_recipients(self) -> Any:
        return self._post('/payment_initiation/recipient/list', {})

    # Accounts and products

    @tracer.capture_method
    def get_accounts(self, access_token: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/accounts/get', {'access_token': access_token, 'options': options})

    @tracer.capture_method
    def get_auth(self, access_token: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/auth/get', {'access_token': access_token, 'options': options})

    @tracer.capture_method
    def get_balance(self, access_token: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/accounts/balance/get', {'access_token': access_token, 'options': options})

    @tracer.capture_method
    def get_credit_details(self, access_token: str) -> Any:
        return self._post('/credit_details/get', {'access_token': access_token})

    @tracer.capture_method
    def get_holdings(self, access_token: str) -> Any:
        return self._post('/investments/holdings/get', {'access_token': access_token})

    @tracer.capture_method
    def get_income(self, access_token: str) -> Any:
        return self._post('/income/get', {'access_token': access_token})

    @tracer.capture_method
    def get_liabilities(self, access_token: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/liabilities/get', {'access_token': access_token, 'options': options})

    @tracer.capture_method
    def get_categories(self) -> Any:
        # Categories are public and take no credentials
        return self._request('/categories/get', {}, None).json()

    # Transactions

    @tracer.capture_method
    def get_transactions(self, access_token: str, start_date: str, end_date: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/transactions/get', {
            'access_token': access_token,
            'start_date': start_date,
            'end_date': end_date,
            'options': options,
        })

    @tracer.capture_method
    def get_all_transactions(self, access_token: str, start_date: str, end_date: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """
        Collect every transaction in a date range by paging through /transactions/get.

        Args:
            access_token: Item access token
            start_date: First date of the range (YYYY-MM-DD)
            end_date: Last date of the range (YYYY-MM-DD)
            options: Extra /transactions/get options; count and offset are managed here

        Returns:
            The last page's response with the transactions of every page merged
        """
        page_options = dict(options or {})
        page_options['count'] = TRANSACTIONS_PAGE_SIZE
        page_options['offset'] = 0

        response = self.get_transactions(access_token, start_date, end_date, dict(page_options))
        transactions = list(response.get('transactions', []))
        total = response.get('total_transactions', len(transactions))

        while len(transactions) < total:
            page_options['offset'] = len(transactions)
            response = self.get_transactions(access_token, start_date, end_date, dict(page_options))
            page = response.get('transactions', [])
            if not page:
                break
            transactions.extend(page)

        logger.debug(f'Collected {len(transactions)} of {total} transactions')
        response['transactions'] = transactions
        return response

    @tracer.capture_method
    def get_investment_transactions(self, access_token: str, start_date: str, end_date: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/investments/transactions/get', {
            'access_token': access_token,
            'start_date': start_date,
            'end_date': end_date,
            'options': options,
        })

    @tracer.capture_method
    def refresh_transactions(self, access_token: str) -> Any:
        return self._post('/transactions/refresh', {'access_token': access_token})

    # Institutions

    @tracer.capture_method
    def get_institutions(self, count: int, offset: int, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/institutions/get', {'count': count, 'offset': offset, 'options': options})

    @tracer.capture_method
    def get_institution_by_id(self, institution_id: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post(
            '/institutions/get_by_id',
            {'institution_id': institution_id, 'options': options},
            self._public_credentials(),
        )

    @tracer.capture_method
    def search_institutions_by_name(self, query: str, products: Optional[List[str]] = None, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post(
            '/institutions/search',
            {'query': query, 'products': products, 'options': options},
            self._public_credentials(),
        )

    # Sandbox

    @tracer.capture_method
    def reset_login(self, access_token: str) -> Any:
        return self._post('/sandbox/item/reset_login', {'access_token': access_token})

    @tracer.capture_method
    def sandbox_item_fire_webhook(self, access_token: str, webhook_code: str) -> Any:
        return self._post('/sandbox/item/fire_webhook', {
            'access_token': access_token,
            'webhook_code': webhook_code,
        })

    @tracer.capture_method
    def sandbox_item_set_verification_status(self, access_token: str, account_id: str, verification_status: str) -> Any:
        return self._post('/sandbox/item/set_verification_status', {
            'access_token': access_token,
            'account_id': account_id,
            'verification_status': verification_status,
        })

    @tracer.capture_method
    def sandbox_public_token_create(self, institution_id: str, initial_products: List[str], options: Optional[Dict[str, Any]] = None) -> Any:
        return self._post('/sandbox/public_token/create', {
            'institution_id': institution_id,
            'initial_products': initial_products,
            'options': options,
        })

    def operation_table(self) -> Dict[Operation, Callable[..., Any]]:
        """Map every supported operation to the bound method implementing it."""
        return {
            Operation.CREATE_ASSET_REPORT: self.create_asset_report,
            Operation.CREATE_DEPOSIT_SWITCH: self.create_deposit_switch,
            Operation.CREATE_DEPOSIT_SWITCH_TOKEN: self.create_deposit_switch_token,
            Operation.CREATE_ITEM_ADD_TOKEN: self.create_item_add_token,
            Operation.CREATE_PAYMENT: self.create_payment,
            Operation.CREATE_PAYMENT_RECIPIENT: self.create_payment_recipient,
            Operation.CREATE_PAYMENT_TOKEN: self.create_payment_token,
            Operation.CREATE_PROCESSOR_TOKEN: self.create_processor_token,
            Operation.CREATE_PUBLIC_TOKEN: self.create_public_token,
            Operation.CREATE_STRIPE_TOKEN: self.create_stripe_token,
            Operation.DELETE_ITEM: self.delete_item,
            Operation.EXCHANGE_PUBLIC_TOKEN: self.exchange_public_token,
            Operation.FILTER_ASSET_REPORT: self.filter_asset_report,
            Operation.GET_ACCOUNTS: self.get_accounts,
            Operation.GET_ALL_TRANSACTIONS: self.get_all_transactions,
            Operation.GET_ASSET_REPORT: self.get_asset_report,
            Operation.GET_ASSET_REPORT_PDF: self.get_asset_report_pdf,
            Operation.GET_AUDIT_COPY: self.get_audit_copy,
            Operation.GET_AUTH: self.get_auth,
            Operation.GET_BALANCE: self.get_balance,
            Operation.GET_CATEGORIES: self.get_categories,
            Operation.GET_CREDIT_DETAILS: self.get_credit_details,
            Operation.GET_DEPOSIT_SWITCH: self.get_deposit_switch,
            Operation.GET_HOLDINGS: self.get_holdings,
            Operation.GET_INCOME: self.get_income,
            Operation.GET_INSTITUTION_BY_ID: self.get_institution_by_id,
            Operation.GET_INSTITUTIONS: self.get_institutions,
            Operation.GET_INVESTMENT_TRANSACTIONS: self.get_investment_transactions,
            Operation.GET_ITEM: self.get_item,
            Operation.GET_LIABILITIES: self.get_liabilities,
            Operation.GET_PAYMENT: self.get_payment,
            Operation.GET_PAYMENT_RECIPIENT: self.get_payment_recipient,
            Operation.GET_TRANSACTIONS: self.get_transactions,
            Operation.GET_WEBHOOK_VERIFICATION_KEY: self.get_webhook_verification_key,
            Operation.IMPORT_ITEM: self.import_item,
            Operation.INVALIDATE_ACCESS_TOKEN: self.invalidate_access_token,
            Operation.LIST_PAYMENT_RECIPIENTS: self.list_payment_recipients,
            Operation.REFRESH_ASSET_REPORT: self.refresh_asset_report,
            Operation.REFRESH_TRANSACTIONS: self.refresh_transactions,
            Operation.REMOVE_ASSET_REPORT: self.remove_asset_report,
            Operation.REMOVE_AUDIT_COPY: self.remove_audit_copy,
            Operation.REMOVE_ITEM: self.remove_item,
            Operation.RESET_LOGIN: self.reset_login,
            Operation.SANDBOX_ITEM_FIRE_WEBHOOK: self.sandbox_item_fire_webhook,
            Operation.SANDBOX_ITEM_SET_VERIFICATION_STATUS: self.sandbox_item_set_verification_status,
            Operation.SANDBOX_PUBLIC_TOKEN_CREATE: self.sandbox_public_token_create,
            Operation.SEARCH_INSTITUTIONS_BY_NAME: self.search_institutions_by_name,
            Operation.UPDATE_ITEM_WEBHOOK: self.update_item_webhook,
        }
