"""内置默认分类：首次启动时写入，存储不可用时作为分类列表的降级结果。"""
from typing import Dict, List

# (category_id, name, code, icon, color)
DEFAULT_CATEGORY_ROWS = [
    ("hoc-duong", "HỌC ĐƯỜNG", "1111", "fas fa-school", "#6366f1"),
    ("mat-the", "MẠT THẾ", "2222", "fas fa-skull-crossbones", "#ef4444"),
    ("he-thong", "HỆ THỐNG", "3333", "fas fa-cogs", "#10b981"),
    ("xay-dung", "XÂY DỰNG", "4444", "fas fa-building", "#f59e0b"),
    ("di-gioi", "DỊ GIỚI", "5555", "fas fa-globe-asia", "#8b5cf6"),
    ("kinh-doanh", "KINH DOANH", "6666", "fas fa-chart-line", "#06b6d4"),
    ("trung-sinh", "TRÙNG SINH", "7777", "fas fa-redo", "#ec4899"),
    ("ngon", "NGÔN", "8888", "fas fa-heart", "#f43f5e"),
    ("tu-tien", "TU TIÊN", "AAA", "fas fa-mountain", "#22c55e"),
    ("do-thi", "ĐÔ THỊ", "BBB", "fas fa-city", "#3b82f6"),
    ("phan-dien", "PHẢN DIỆN", "CCC", "fas fa-user-ninja", "#0ea5e9"),
    ("vo-han-luu", "VÔ HẠN LƯU", "EEE", "fas fa-infinity", "#a855f7"),
    ("manh", "MẠNH", "DDD", "fas fa-fist-raised", "#f97316"),
    ("quy-than", "QUỶ THẦN", "FFF", "fas fa-ghost", "#6b7280"),
    ("ecchi", "ECCHI", "9999", "fas fa-fire", "#dc2626"),
    ("phim", "PHIM", "0000", "fas fa-film", "#8b5cf6"),
]


def default_categories() -> List[Dict[str, str]]:
    """返回默认分类的新副本（调用方可以自由修改）"""
    return [
        {"category_id": category_id, "name": name, "code": code, "icon": icon, "color": color}
        for category_id, name, code, icon, color in DEFAULT_CATEGORY_ROWS
    ]
