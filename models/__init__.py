from .user import User, UserRole
from .merchant_category import MerchantCategory, merchant_category_links
from .tag import Tag, tag_stores
from .merchant import Merchant
from .coupon import Coupon, CouponType, MerchantProof
from .blog import Blog, BlogCategory, Author
