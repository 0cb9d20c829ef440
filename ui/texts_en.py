APP_TITLE = "Jewel Cost"

# Page titles
PAGE_DASHBOARD = "Dashboard"
PAGE_COMPONENTS = "Components"
PAGE_PRODUCTS = "Products"

# Buttons
BTN_ADD = "Add"
BTN_SAVE_PRODUCT = "Save Product"
BTN_DELETE = "Delete"
BTN_ANALYZE = "Analyze Now"
BTN_IMPORT = "Import"
BTN_COMPONENT_TEMPLATE = "Download component template"
BTN_PRODUCT_TEMPLATE = "Download product template"
BTN_DOWNLOAD_REPORT = "Download cost report"

# Labels
LBL_NAME = "Name"
LBL_PRICE = "Price"
LBL_UNIT = "Unit"
LBL_CATEGORY = "Category"
LBL_SKU = "SKU"
LBL_MAKING_CHARGES = "Making Charges"
LBL_QUANTITY = "Quantity"
LBL_SEARCH_COMPONENT = "Search components"
LBL_SEARCH_PRODUCT = "Search products"
LBL_IMPORT_FILE = "Import components (.xlsx or .csv)"

# Guidance
MSG_LOADING = "Loading..."
MSG_ANALYZE_HINT = 'Click "Analyze Now" to generate insights based on your current inventory and product recipes.'
MSG_NEED_COMPONENTS = "Add components before building products."
MSG_COMPONENT_SAVED = "Component saved"
MSG_COMPONENT_DELETED = "Component deleted. Products using it now count that line as zero."
MSG_PRODUCT_SAVED = "Product saved"
MSG_PRODUCT_DELETED = "Product deleted"
MSG_IMPORTED = "Successfully imported {count} components."
MSG_NO_PRODUCTS = "No products yet."

# Validation
ERR_NAME_REQUIRED = "Name is required."
ERR_PRICE_REQUIRED = "Price must be greater than zero."
ERR_PRODUCT_NAME_REQUIRED = "Product name required."
ERR_IMPORT = "Error parsing file. Please use the template."
ERR_GENERIC = "The operation could not be completed."
