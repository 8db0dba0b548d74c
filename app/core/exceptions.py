# app/core/exceptions.py


class CampusFeedError(Exception):
    """關係模組自己丟出的錯誤都繼承這個"""


class InvalidOperand(CampusFeedError):
    """
    兩端是同一個人 (自己加自己、自己封鎖自己)。
    這種關係永遠不會寫進資料庫。
    """

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"user {user_id} cannot hold a relationship with themselves")
