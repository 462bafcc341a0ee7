# -----------------------------
# Transactions Repository
# -----------------------------

TRANSACTION_COLUMNS = """
    t.id, t.user_id, t.date, t.description, t.amount, t.type,
    t.is_recurring, t.recurrence_frequency, t.is_active,
    c.id AS category_id, c.name AS category_name,
    c.type AS category_type, c.color AS category_color
"""


def _row_to_dict(row):
    """Map a joined transaction row to the shape callers post over HTTP."""
    (tx_id, user_id, tx_date, description, amount, tx_type,
     is_recurring, frequency, is_active,
     category_id, category_name, category_type, category_color) = row

    category = None
    if category_id is not None:
        category = {
            "id": category_id,
            "name": category_name,
            "type": category_type,
            "color": category_color,
        }

    return {
        "id": tx_id,
        "user_id": user_id,
        "date": tx_date.isoformat(),
        "description": description,
        "amount": amount,
        "type": tx_type,
        "category": category,
        "is_recurring": is_recurring,
        "recurrence_frequency": frequency,
        "is_active": is_active,
    }


def insert_transaction(conn, *, id, user_id, date, amount, type,
                       description=None, category_id=None,
                       is_recurring=False, recurrence_frequency=None,
                       is_active=True):
    """
    Inserts a transaction (or a recurring definition) for a user.
    - conn: DuckDB connection (from get_db() or passed in)
    """
    try:
        conn.execute(
            """
            INSERT INTO transactions
            (id, user_id, date, description, amount, type, category_id,
             is_recurring, recurrence_frequency, is_active)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (id, user_id, date, description, amount, type, category_id,
             is_recurring, recurrence_frequency, is_active)
        )
    except Exception as e:
        msg = str(e).lower()
        if "duplicate" in msg or "unique" in msg or "primary key" in msg:
            raise ValueError(f"Duplicate transaction id: {id}") from e
        raise


def get_transactions_in_range(conn, user_id, start_date, end_date):
    """
    Returns a user's transactions dated within [start_date, end_date],
    oldest first, with the category joined as a dict.
    """
    rows = conn.execute(
        f"""
        SELECT {TRANSACTION_COLUMNS}
        FROM transactions t
        LEFT JOIN categories c ON t.category_id = c.id
        WHERE t.user_id = ?
          AND t.date >= ?
          AND t.date <= ?
        ORDER BY t.date ASC
        """,
        (user_id, start_date, end_date)
    ).fetchall()
    return [_row_to_dict(r) for r in rows]


def get_recurring_transactions(conn, user_id):
    """
    Returns a user's recurring definitions mapped to the recurring shape
    (``frequency`` and ``start_date`` instead of the stored column names).
    """
    rows = conn.execute(
        f"""
        SELECT {TRANSACTION_COLUMNS}
        FROM transactions t
        LEFT JOIN categories c ON t.category_id = c.id
        WHERE t.user_id = ?
          AND t.is_recurring = TRUE
          AND t.recurrence_frequency IS NOT NULL
        ORDER BY t.date ASC
        """,
        (user_id,)
    ).fetchall()

    recurring = []
    for r in rows:
        tx = _row_to_dict(r)
        tx["frequency"] = tx.pop("recurrence_frequency")
        tx["start_date"] = tx["date"]
        recurring.append(tx)
    return recurring
