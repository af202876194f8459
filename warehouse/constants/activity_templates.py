from warehouse.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_role} ({actor_username}) logged in",

    # ---------------- USERS ----------------
    ActivityCode.CREATE_USER:
        "{actor_role} ({actor_username}) created user {target_username} with role {target_role}",

    # ---------------- CATALOG ----------------
    ActivityCode.CREATE_ITEM:
        "{actor_role} ({actor_username}) created item {target_name} ({item_code})",

    ActivityCode.UPDATE_ITEM:
        "{actor_role} ({actor_username}) updated item {target_name}: {changes}",

    ActivityCode.CREATE_LOCATION:
        "{actor_role} ({actor_username}) created location {target_name}",

    ActivityCode.CREATE_CATEGORY:
        "{actor_role} ({actor_username}) created category {target_name}",

    # ---------------- LEDGER ----------------
    ActivityCode.STOCK_IN:
        "{actor_role} ({actor_username}) stocked in {quantity} x {item_code} "
        "at {location_code} (record {record_id})",

    ActivityCode.STOCK_OUT:
        "{actor_role} ({actor_username}) stocked out {quantity} x {item_code} "
        "from {location_code} (record {record_id})",

    ActivityCode.BORROW_ITEM:
        "{actor_role} ({actor_username}) lent {quantity} x {item_code} "
        "from {location_code} to user {borrower_id} (record {record_id})",

    ActivityCode.RETURN_ITEM:
        "{actor_role} ({actor_username}) took back {quantity} x {item_code} "
        "at {location_code} closing borrow {borrow_id} (record {record_id})",
}
