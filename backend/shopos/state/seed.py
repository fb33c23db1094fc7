# Overview: Baseline reference data used when nothing is persisted and as the
# credential source merged into persisted users on startup.
#
# Every builder returns fresh objects so callers can never alias the seed.

from __future__ import annotations

from datetime import datetime, timedelta

from ..time_utils import utcnow, to_utc_z


DEFAULT_ICON_URL = "https://ssl.gstatic.com/s2/profiles/images/silhouette200.png"


def seed_users() -> list[dict]:
    # Seed passwords and pins are authoritative: they overwrite persisted ones on load.
    return [
        {"id": "Admin", "name": "Admin", "role": "admin", "phone": "+10000000001",
         "email": "admin@shopos.local", "iconUrl": DEFAULT_ICON_URL, "password": "Admin@2050", "pin": "2050"},
        {"id": "UID-0002", "name": "Staff", "role": "staff", "phone": "+10000000002",
         "email": "staff@shopos.local", "iconUrl": DEFAULT_ICON_URL, "password": "password", "pin": "1234"},
        {"id": "UID-0003", "name": "Sales Manager", "role": "sales_manager", "phone": "+10000000003",
         "email": "manager@shopos.local", "iconUrl": DEFAULT_ICON_URL, "password": "Manager@2025", "pin": "2025"},
        {"id": "Monitor", "name": "Monitor", "role": "monitor", "phone": "+10000000004",
         "email": "monitor@shopos.local", "iconUrl": DEFAULT_ICON_URL, "password": "Monitor#24", "pin": "2024"},
        {"id": "Developer", "name": "Developer", "role": "super_user", "phone": "+10000000005",
         "email": "developer@shopos.local", "iconUrl": DEFAULT_ICON_URL, "password": "Developer@25", "pin": "1658"},
    ]


def seed_product_categories() -> list[dict]:
    return [
        {"id": "cat_motherboard", "name": "Motherboards", "enabled": True},
        {"id": "cat_processor", "name": "Processors", "enabled": True},
        {"id": "cat_beverages", "name": "Beverages", "enabled": True},
        {"id": "cat_dairy_eggs", "name": "Dairy & Eggs", "enabled": True},
        {"id": "cat_bakery_breads", "name": "Bakery & Breads", "enabled": True},
        {"id": "cat_snacks", "name": "Snacks & Confectionery", "enabled": True},
        {"id": "cat_fruits_veg", "name": "Fruits & Vegetables", "enabled": True},
        {"id": "cat_electronics", "name": "Electronics", "enabled": True},
        {"id": "cat_computer_parts", "name": "Computer Parts", "enabled": True},
        {"id": "cat_bill_recharge", "name": "Bill Payment & Recharge", "enabled": True},
        {"id": "cat_household", "name": "Household & Cleaning", "enabled": False},
    ]


def seed_offers() -> list[dict]:
    return [
        {
            "id": "offer_1",
            "name": "Motherboard Mania",
            "discountType": "percentage",
            "discountValue": 10,
            "appliesTo": "categories",
            "targetIds": ["cat_motherboard"],
            "enabled": True,
        },
        {
            "id": "offer_2",
            "name": "Staff Discount on Snacks",
            "discountType": "fixed",
            "discountValue": 50,
            "appliesTo": "products",
            "targetIds": [],
            "enabled": True,
        },
    ]


def seed_printers() -> list[dict]:
    return [
        {"id": "printer_thermal_1", "name": "Cashier Receipt Printer", "type": "thermal",
         "connectionType": "usb", "description": "Main printer for receipts at the front desk.", "isDeleted": False},
        {"id": "printer_laser_1", "name": "Office Laser Printer", "type": "laser", "connectionType": "network",
         "ipAddress": "192.168.1.100", "description": "For printing A4 invoices and reports.", "isDeleted": False},
        {"id": "printer_barcode_1", "name": "Label Printer", "type": "thermal", "connectionType": "usb",
         "description": "Used for printing product barcode labels.", "isDeleted": True},
        {"id": "printer_lan_1", "name": "Warehouse LAN Printer", "type": "laser", "connectionType": "lan",
         "ipAddress": "192.168.1.102", "description": "Network printer in the warehouse for packing slips.",
         "isDeleted": False},
        {"id": "printer_bt_1", "name": "Mobile Bluetooth Printer", "type": "thermal", "connectionType": "bluetooth",
         "description": "Portable printer for on-the-go receipts.", "isDeleted": False},
    ]


def seed_card_machines() -> list[dict]:
    return [
        {"id": "cm_1", "name": "Front Desk Terminal", "provider": "Stripe", "status": "Connected",
         "description": "Main card reader at the front counter.", "isDeleted": False},
        {"id": "cm_2", "name": "Manager Office POS", "provider": "Square", "status": "Connected",
         "description": "POS terminal in the manager's office for phone orders.", "isDeleted": False},
        {"id": "cm_3", "name": "Old Bank Terminal", "provider": "Local Bank", "status": "Disconnected",
         "description": "Old terminal, kept as a backup.", "isDeleted": True},
    ]


def seed_attendance_machines() -> list[dict]:
    return [
        {"id": "attm-001", "name": "Main Entrance Fingerprint", "type": "fingerprint", "status": "online",
         "ipAddress": "192.168.1.150", "isDeleted": False},
        {"id": "attm-002", "name": "Warehouse Face Scanner", "type": "face_recognition", "status": "offline",
         "ipAddress": "192.168.1.151", "isDeleted": False},
        {"id": "attm-003", "name": "Old Card Scanner", "type": "card_scanner", "status": "offline", "isDeleted": True},
    ]


def seed_usb_devices() -> list[dict]:
    return [
        {"id": "usb_1", "name": "USB Keyboard", "type": "Keyboard", "status": "Connected"},
        {"id": "usb_2", "name": "Optical Mouse", "type": "Mouse", "status": "Connected"},
        {"id": "usb_3", "name": "Barcode Scanner", "type": "Other", "status": "Connected"},
    ]


def seed_bluetooth_devices() -> list[dict]:
    return [
        {"id": "00:1A:7D:DA:71:13", "name": "Wireless Headset", "type": "Headset", "signalStrength": -55,
         "status": "Connected"},
        {"id": "BC:F2:92:0A:9C:F5", "name": "Counter Speaker", "type": "Speaker", "signalStrength": -72,
         "status": "Paired"},
        {"id": "A1:B2:C3:D4:E5:F6", "name": "Staff Smartphone", "type": "Phone", "signalStrength": -61,
         "status": "Connected"},
    ]


def seed_network_devices() -> list[dict]:
    return [
        {"ipAddress": "192.168.1.1", "macAddress": "C0:3E:BA:C1:23:45", "hostname": "router.local",
         "type": "Router", "connection": "Ethernet"},
        {"ipAddress": "192.168.1.15", "macAddress": "A1:B2:C3:D4:E5:F6", "hostname": "manager-pc",
         "type": "Computer", "connection": "WiFi"},
        {"ipAddress": "192.168.1.22", "macAddress": "F1:E2:D3:C4:B5:A6", "hostname": "storage-nas",
         "type": "NAS", "connection": "Ethernet"},
    ]


def seed_settings(now: datetime | None = None) -> dict:
    now = now or utcnow()
    gateway = {"enabled": False, "apiKey": "", "apiSecret": ""}
    return {
        "shopName": "ShopOS Demo Store",
        "shopAddress": "1 Market Street",
        "shopPhone": "+10000000000",
        "shopLogo": "",
        "footerText": "ShopOS Demo Store. All Rights Reserved.",
        "headerMessage": "Grand Opening! Up to 20% off on selected items.",
        "developerName": "ShopOS",
        "developerCompany": "ShopOS",
        "theme": "astra",
        "language": "en",
        "currency": "BDT",
        "barcodeEnabled": True,
        "pcBuilderEnabled": True,
        "purchasesEnabled": True,
        "deleteAllProductsEnabled": True,
        "fontFamily": "Inter",
        "timeZone": "Asia/Dhaka",
        "invoiceDueDateDays": 30,
        "invoiceNotes": "Thank you for your business. Please contact us for any query.",
        "invoiceTerms": "All sales are final. Please check products before leaving.",
        "invoiceTitle": "Invoice/Cash Memo",
        "invoiceAccentColor": "#4f46e5",
        "defaultWarranty": "1 Year",
        "defaultGuaranty": "6 Months",
        "defaultPrintFormat": "invoice",
        "warrantyAndGuarantyEnabled": True,
        "countdownOfferEnabled": True,
        "countdownOfferText": "Grand Opening Sale Ends In:",
        "countdownOfferExpiry": to_utc_z(now + timedelta(days=5)),
        "specialOffersEnabled": True,
        "specialOffers": seed_offers(),
        "twoFactorEnabled": False,
        "productCategories": seed_product_categories(),
        "backupDrivePath": "",
        "cloudBackup": {
            "automatic": False,
            "providers": {
                "googleDrive": {"enabled": False, "apiKey": ""},
                "oneDrive": {"enabled": False, "apiKey": ""},
                "iCloud": {"enabled": False, "apiKey": ""},
                "mega": {"enabled": False, "apiKey": ""},
                "pCloud": {"enabled": False, "apiKey": ""},
            },
        },
        "defaultPrinters": {
            "invoice": "printer_laser_1",
            "receipt": "printer_thermal_1",
            "barcode": "printer_barcode_1",
        },
        "socialLinks": [],
        "permissions": {
            "/": ["admin", "sales_manager", "monitor"],
            "/sales": ["admin", "sales_manager", "staff"],
            "/purchases": ["admin", "sales_manager"],
            "/products": ["admin", "sales_manager", "monitor"],
            "/customers": ["admin", "sales_manager", "staff", "monitor"],
            "/suppliers": ["admin", "sales_manager", "monitor"],
            "/reports": ["admin", "sales_manager", "monitor"],
            "/dues": ["admin", "sales_manager", "monitor"],
            "/users": ["admin", "super_user", "monitor"],
            "/settings": ["admin", "super_user"],
            "/files": ["admin"],
            "/connected-devices": ["admin", "super_user"],
            "/pc-builder": ["admin", "sales_manager"],
            "/notifications": ["admin", "sales_manager", "staff", "monitor"],
        },
        "cardPaymentGateways": {
            "stripe": dict(gateway),
            "square": dict(gateway),
        },
        "mobileBankingGateways": {
            "bKash": dict(gateway),
            "nagad": dict(gateway),
            "rocket": dict(gateway),
            "upay": dict(gateway),
        },
        "smsGateway": {
            "provider": "MockSMS",
            "apiKey": "MOCK_API_KEY",
            "apiSecret": "MOCK_API_SECRET",
            "senderId": "ShopOS",
        },
    }


def build_seed_state(now: datetime | None = None) -> dict:
    """Fresh initial AppState: seed reference data, empty ledgers, no session."""
    return {
        "products": [],
        "printers": seed_printers(),
        "cardMachines": seed_card_machines(),
        "customers": [
            {"id": "cust_walkin", "name": "Walk-in Customer", "phone": "N/A", "email": "N/A", "address": "N/A"},
        ],
        "suppliers": [
            {"id": "sup_intel", "name": "John Doe", "phone": "+123456789", "address": "Santa Clara, CA",
             "company": "Intel Corp"},
            {"id": "sup_amd", "name": "Jane Smith", "phone": "+987654321", "address": "Santa Clara, CA",
             "company": "AMD Inc."},
            {"id": "sup_local_grocery", "name": "Local Grocer", "phone": "+555-1234", "address": "Local Town",
             "company": "Fresh Foods Ltd."},
        ],
        "sales": [],
        "saleReturns": [],
        "purchases": [],
        "servicePurchases": [],
        "dueCollections": [],
        "attendance": [],
        "attendanceMachines": seed_attendance_machines(),
        "damagedProducts": [],
        "settings": seed_settings(now),
        "notifications": [],
        "users": seed_users(),
        "currentUser": None,
        "loginError": None,
        "usbDevices": seed_usb_devices(),
        "bluetoothDevices": seed_bluetooth_devices(),
        "networkDevices": seed_network_devices(),
    }
