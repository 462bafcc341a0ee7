# -----------------------------
# Company Settings / Categories Repository
# -----------------------------

def get_company_settings(conn, user_id):
    """Return the settings row for the user as a dict, or None if missing."""
    row = conn.execute(
        """
        SELECT user_id, company_name, default_currency, fiscal_year_start
        FROM company_settings
        WHERE user_id = ?
        """,
        (user_id,)
    ).fetchone()

    if row:
        return {
            "user_id": row[0],
            "company_name": row[1],
            "default_currency": row[2],
            "fiscal_year_start": row[3],
        }
    return None


def upsert_company_settings(conn, user_id, default_currency="USD",
                            fiscal_year_start="01", company_name=None):
    conn.execute(
        """
        INSERT OR REPLACE INTO company_settings
        (user_id, company_name, default_currency, fiscal_year_start)
        VALUES (?, ?, ?, ?)
        """,
        (user_id, company_name, default_currency, fiscal_year_start)
    )


def add_category(conn, id, name, user_id=None, type="expense", color="#888888"):
    conn.execute(
        "INSERT INTO categories (id, user_id, name, type, color) VALUES (?, ?, ?, ?, ?)",
        (id, user_id, name, type, color)
    )
